# =============================================================================
# core/models/tree.py - File Tree Schemas
# =============================================================================
# These models describe the storage root as a nested listing:
# - FileNode: a regular file with size, timestamp and download URL
# - DirectoryNode: a folder with its (recursive) children
#
# Nodes are built fresh on every listing request and never persisted.
# =============================================================================

from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, Field


class FileNode(BaseModel):
    """
    A regular file in the listing.

    Example:
        {
            "name": "c.txt",
            "path": "b/c.txt",
            "is_dir": false,
            "size": 3,
            "uploaded_at": "2024-01-15T10:30:00Z",
            "url": "/uploads/b/c.txt"
        }
    """

    name: str = Field(..., description="Entry name (last path segment)")

    path: str = Field(..., description="Path relative to the storage root")

    is_dir: Literal[False] = False

    size: int = Field(..., ge=0, description="Size in bytes")

    # Creation time where the platform records one, else last modification
    uploaded_at: datetime = Field(..., description="When the file landed")

    url: str = Field(..., description="Authenticated download URL")


class DirectoryNode(BaseModel):
    """
    A folder in the listing, with its visible children.

    Children are sorted by name. Hidden entries are never included.
    """

    name: str = Field(..., description="Entry name (last path segment)")

    path: str = Field(..., description="Path relative to the storage root")

    is_dir: Literal[True] = True

    children: list[Union["DirectoryNode", FileNode]] = Field(
        default_factory=list,
        description="Nested entries"
    )


TreeNode = Union[DirectoryNode, FileNode]


class TreeResponse(BaseModel):
    """Response for GET /api/files."""

    tree: list[TreeNode] = Field(default_factory=list)
