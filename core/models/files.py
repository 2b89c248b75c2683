# =============================================================================
# core/models/files.py - File Operation Schemas
# =============================================================================
# These models define the API contract for file operations:
# - SavedFile / UploadResponse: result of POST /upload
# - FolderRequest: input for creating a folder
# - MoveRequest: input for moving a file or folder
# - OkResponse: acknowledgement for mutations without a payload
#
# Paths in requests are raw client input. They are sanitized by the
# services, so the models only fix their shape.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class SavedFile(BaseModel):
    """
    Descriptor of a file placed into storage by an upload.

    Example:
        {
            "name": "report.pdf",
            "path": "docs/report.pdf",
            "size": 18234,
            "url": "/uploads/docs/report.pdf"
        }
    """

    name: str
    path: str
    size: int = Field(..., ge=0)
    url: str


class UploadResponse(BaseModel):
    """Response for POST /api/upload."""

    files: list[SavedFile] = Field(default_factory=list)


class FolderRequest(BaseModel):
    """Input for POST /api/folders."""

    path: str = Field(default="", description="Folder to create, e.g. 'photos/2024'")


class MoveRequest(BaseModel):
    """
    Input for POST /api/move.

    The wire field for the source is "from", which is a Python keyword,
    so it is aliased.

    Example:
        {"from": "folder/old.txt", "to": "folder2/new.txt"}
    """

    model_config = ConfigDict(populate_by_name=True)

    from_path: str = Field(default="", alias="from", description="Current path")

    to_path: str = Field(default="", alias="to", description="New path")


class OkResponse(BaseModel):
    """Acknowledgement for successful mutations."""

    ok: bool = True
