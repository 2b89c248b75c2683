# =============================================================================
# core/services/tree_service.py - Storage Tree Listing
# =============================================================================
# Walks the storage root and returns it as nested DirectoryNode/FileNode
# models. The walk is live on every call: no index, no cache.
#
# Skipped entries:
# - hidden names (leading '.'), never listed and never recursed into
# - symlinks, sockets, devices and other non-regular entries
#
# Symlinks are not followed, so the walk cannot loop.
# =============================================================================

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from app.exceptions import InvalidTargetError, NotFoundError, StorageIOError
from core.models.tree import DirectoryNode, FileNode, TreeNode
from lib.paths import build_download_url, resolve_within_root, sanitize_rel_path

logger = logging.getLogger(__name__)


def _file_timestamp(stat: os.stat_result) -> datetime:
    """Creation time where the platform exposes it, else last modification."""
    created = getattr(stat, "st_birthtime", None)
    return datetime.fromtimestamp(created if created else stat.st_mtime, tz=timezone.utc)


def _walk(directory: Path, rel: str) -> list[TreeNode]:
    """Recursively describe one directory. Entries are sorted by name."""
    nodes: list[TreeNode] = []

    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        if entry.name.startswith("."):
            continue

        entry_rel = f"{rel}/{entry.name}" if rel else entry.name

        if entry.is_symlink():
            continue

        try:
            if entry.is_dir(follow_symlinks=False):
                nodes.append(DirectoryNode(
                    name=entry.name,
                    path=entry_rel,
                    children=_walk(Path(entry.path), entry_rel),
                ))
            elif entry.is_file(follow_symlinks=False):
                stat = entry.stat(follow_symlinks=False)
                nodes.append(FileNode(
                    name=entry.name,
                    path=entry_rel,
                    size=stat.st_size,
                    uploaded_at=_file_timestamp(stat),
                    url=build_download_url(entry_rel),
                ))
        except FileNotFoundError:
            # Removed by a concurrent request while we were walking
            logger.debug(f"Entry vanished during listing: {entry_rel}")

    return nodes


def list_tree(root: Path, relative_path: str = "") -> list[TreeNode]:
    """
    List the storage tree below a folder.

    Args:
        root: Storage root
        relative_path: Folder to list, relative to the root ("" for the root)

    Returns:
        Visible entries of the folder, folders carrying their children

    Raises:
        NotFoundError: If the folder doesn't exist
        InvalidTargetError: If the path is a file
        StorageIOError: On any other filesystem error
    """
    rel = sanitize_rel_path(relative_path)
    target = resolve_within_root(root, rel)

    try:
        if not target.exists():
            raise NotFoundError(rel, what="Folder")
        if not target.is_dir():
            raise InvalidTargetError(rel, reason="Only folders can be listed")

        return _walk(target, rel)

    except (NotFoundError, InvalidTargetError):
        raise
    except FileNotFoundError:
        # Folder vanished between the check and the walk
        raise NotFoundError(rel, what="Folder")
    except OSError as e:
        logger.error(f"Could not list files under '{rel or '/'}': {e}")
        raise StorageIOError("list files", str(e))
