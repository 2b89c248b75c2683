# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .archive_service import iter_zip, resolve_archive_target, stream_zip
from .credential_service import CredentialStore
from .file_ops_service import FileOpsService
from .tree_service import list_tree

__all__ = [
    "CredentialStore",
    "FileOpsService",
    "iter_zip",
    "list_tree",
    "resolve_archive_target",
    "stream_zip",
]
