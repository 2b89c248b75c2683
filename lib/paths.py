# =============================================================================
# lib/paths.py - Path Safety Utilities
# =============================================================================
# Turns client-supplied relative paths into safe paths under the storage root.
#
# Every path that reaches the filesystem goes through two gates:
# 1. sanitize_rel_path() - string-level cleanup of the raw client input
# 2. resolve_within_root() - resolved-path check right before the operation
#    (resolve_entry_within_root() for mutations, which never follow a
#    symlink in the last segment)
#
# Usage:
#   from lib.paths import sanitize_rel_path, resolve_within_root
#
#   rel = sanitize_rel_path(request_path)
#   target = resolve_within_root(settings.storage_root, rel)
# =============================================================================

import re
from pathlib import Path
from urllib.parse import quote

from app.exceptions import InvalidPathError

# Anything outside this set is replaced with an underscore
UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")

# Prefix for authenticated file downloads (see app/routers/downloads.py)
DOWNLOAD_PREFIX = "/uploads/"


# =============================================================================
# Sanitizing
# =============================================================================

def sanitize_segment(segment: str) -> str:
    """Replace every character outside [A-Za-z0-9._-] with '_'."""
    return UNSAFE_CHARS.sub("_", segment)


def sanitize_rel_path(raw: str | None) -> str:
    """
    Normalize a client-supplied path into a safe relative path.

    Never fails. Backslashes are treated as separators, empty and '.'
    segments are dropped, and unsafe characters become '_'. A path with
    any '..' segment is a traversal attempt and collapses to the root.

    Args:
        raw: Path as sent by the client (may be None)

    Returns:
        Relative path with '/' separators, or "" for the root

    Example:
        sanitize_rel_path("docs\\my report.pdf")  # "docs/my_report.pdf"
        sanitize_rel_path("../../etc/passwd")     # ""
    """
    if not raw:
        return ""

    segments = raw.replace("\\", "/").split("/")
    if ".." in segments:
        return ""

    return "/".join(
        sanitize_segment(segment)
        for segment in segments
        if segment and segment != "."
    )


# =============================================================================
# Root Confinement
# =============================================================================

def is_within(root: Path, candidate: Path) -> bool:
    """Check that an already-resolved path is the root or lies beneath it."""
    return candidate == root or root in candidate.parents


def resolve_within_root(root: Path, rel: str) -> Path:
    """
    Resolve a relative path against the storage root.

    Symlinks are followed during resolution, so a link pointing outside the
    root is rejected just like a literal escape.

    Raises:
        InvalidPathError: If the resolved path leaves the root
    """
    resolved_root = root.resolve()
    candidate = (resolved_root / rel).resolve()

    if not is_within(resolved_root, candidate):
        raise InvalidPathError(rel, reason="Path escapes the storage root")

    return candidate


def resolve_entry_within_root(root: Path, rel: str) -> Path:
    """
    Resolve the path of a named entry for a mutation.

    Only the parent folder is resolved and confined. The last segment is
    kept as written, so a symlink is addressed as the link itself and
    never as whatever it points to.

    Raises:
        InvalidPathError: If the parent folder leaves the root
    """
    parent_rel, _, name = rel.rpartition("/")
    if not name:
        return resolve_within_root(root, rel)
    return resolve_within_root(root, parent_rel) / name


def to_rel_path(root: Path, path: Path) -> str:
    """Express a path under the root as a '/'-separated relative path."""
    return path.relative_to(root).as_posix()


# =============================================================================
# Names and URLs
# =============================================================================

def build_download_url(rel: str) -> str:
    """
    Build the download URL for a stored file.

    The path is percent-encoded but '/' is kept as a literal separator.

    Example:
        build_download_url("docs/a b.txt")  # "/uploads/docs/a%20b.txt"
    """
    return DOWNLOAD_PREFIX + quote(rel, safe="/")


def safe_archive_name(rel: str) -> str:
    """Content-Disposition filename for a zip of the given folder."""
    return f"{sanitize_segment(rel or 'archive') or 'archive'}.zip"
