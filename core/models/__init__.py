# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - tree.py: File tree listing (FileNode / DirectoryNode)
# - files.py: Upload, folder and move request/response schemas
# - credentials.py: Stored admin credential record
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Tree Models - Storage listing
# -----------------------------------------------------------------------------
from .tree import (
    DirectoryNode,
    FileNode,
    TreeNode,
    TreeResponse,
)

# -----------------------------------------------------------------------------
# File Operation Models
# -----------------------------------------------------------------------------
from .files import (
    FolderRequest,
    MoveRequest,
    OkResponse,
    SavedFile,
    UploadResponse,
)

# -----------------------------------------------------------------------------
# Credential Models
# -----------------------------------------------------------------------------
from .credentials import CredentialRecord

__all__ = [
    # Tree
    "DirectoryNode",
    "FileNode",
    "TreeNode",
    "TreeResponse",
    # Files
    "FolderRequest",
    "MoveRequest",
    "OkResponse",
    "SavedFile",
    "UploadResponse",
    # Credentials
    "CredentialRecord",
]
