# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - paths.py: Path sanitizing, root confinement, download URLs
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.paths import (
    build_download_url,
    resolve_entry_within_root,
    resolve_within_root,
    safe_archive_name,
    sanitize_rel_path,
)

__all__ = [
    "build_download_url",
    "resolve_entry_within_root",
    "resolve_within_root",
    "safe_archive_name",
    "sanitize_rel_path",
]
