# =============================================================================
# app/routers/files.py - File Management Endpoints
# =============================================================================
# Listing, upload, delete, folder creation, move and zip download.
#
# Uploads are two-phase: the request body is staged to STAGING_DIR here,
# then FileOpsService moves the finished file into the storage root.
# =============================================================================

import json
import logging
from pathlib import Path
from typing import Annotated
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import StreamingResponse

from app.auth import get_current_user, AuthUser
from app.dependencies import FileOpsDep, StagingDirDep, StorageRootDep
from app.exceptions import FileTooLargeError, NoFilesUploadedError, StorageIOError
from core.models.files import FolderRequest, MoveRequest, OkResponse, UploadResponse
from core.models.tree import TreeResponse
from core.services.archive_service import iter_zip, resolve_archive_target
from core.services.tree_service import list_tree
from lib.paths import safe_archive_name, sanitize_rel_path, sanitize_segment

logger = logging.getLogger(__name__)

router = APIRouter()

# Bytes read from the request body per step while staging
UPLOAD_CHUNK_SIZE = 1024 * 1024


# =============================================================================
# Helper Functions
# =============================================================================

def _parse_paths(raw: str | None) -> list:
    """Parse the optional 'paths' form field (JSON list of target paths)."""
    if not raw:
        return []
    try:
        paths = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse paths: {e}")
        return []
    if not isinstance(paths, list):
        logger.warning("Ignoring 'paths' field that is not a JSON list")
        return []
    return paths


async def _stage_upload(upload: UploadFile, staging_dir: Path, max_bytes: int) -> tuple[Path, int]:
    """
    Copy one uploaded file to the staging directory.

    Stops as soon as the byte count passes the cap, so an oversized upload
    never lands anywhere near the storage root.

    Returns:
        (staged file path, size in bytes)
    """
    if upload.size is not None and upload.size > max_bytes:
        raise FileTooLargeError(upload.size, max_bytes)

    staging_dir.mkdir(parents=True, exist_ok=True)
    original = sanitize_segment(Path(upload.filename or "upload").name)
    staged = staging_dir / f"{uuid4().hex}-{original}"

    size = 0
    try:
        with open(staged, "wb") as out:
            while chunk := await upload.read(UPLOAD_CHUNK_SIZE):
                size += len(chunk)
                if size > max_bytes:
                    raise FileTooLargeError(size, max_bytes)
                out.write(chunk)
    except FileTooLargeError:
        staged.unlink(missing_ok=True)
        raise
    except OSError as e:
        staged.unlink(missing_ok=True)
        logger.error(f"Could not stage upload '{upload.filename}': {e}")
        raise StorageIOError("save files", str(e))

    return staged, size


# =============================================================================
# Listing
# =============================================================================

@router.get("/files", response_model=TreeResponse)
async def get_files(
    root: StorageRootDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    List every visible file and folder under the storage root.

    Folders carry their children. Hidden entries are never listed.
    """
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create storage root: {e}")
        raise StorageIOError("list files", str(e))

    return TreeResponse(tree=list_tree(root))


# =============================================================================
# Upload
# =============================================================================

@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    ops: FileOpsDep,
    staging_dir: StagingDirDep,
    files: Annotated[list[UploadFile] | None, File(description="Files to upload")] = None,
    paths: Annotated[str | None, Form(description="JSON list of target paths, one per file")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload one or more files.

    File i is stored at paths[i] when given, else at its client filename.
    Folder structure in the target path is created as needed.
    """
    if not files:
        raise NoFilesUploadedError()

    targets = _parse_paths(paths)
    saved = []

    for i, upload in enumerate(files):
        target = targets[i] if i < len(targets) else None
        if not isinstance(target, str) or not target:
            target = upload.filename or ""

        staged, size = await _stage_upload(upload, staging_dir, ops.max_upload_bytes)
        try:
            saved.append(ops.upload(target, staged, size))
        finally:
            staged.unlink(missing_ok=True)

    logger.info(f"Upload complete: {len(saved)} file(s)")
    return UploadResponse(files=saved)


# =============================================================================
# Delete / Folders / Move
# =============================================================================

@router.delete("/files", response_model=OkResponse)
async def delete_file(
    ops: FileOpsDep,
    path: Annotated[str, Query(description="File or folder to delete")] = "",
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a file, or a folder with all its contents.
    """
    ops.delete(path)
    return OkResponse()


@router.post("/folders", response_model=OkResponse)
async def create_folder(
    body: FolderRequest,
    ops: FileOpsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a folder (and missing parents). Creating an existing folder is fine.
    """
    ops.create_folder(body.path)
    return OkResponse()


@router.post("/move", response_model=OkResponse)
async def move_item(
    body: MoveRequest,
    ops: FileOpsDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Move or rename a file or folder.
    """
    ops.move(body.from_path, body.to_path)
    return OkResponse()


# =============================================================================
# Zip Download
# =============================================================================

@router.get("/zip")
async def download_zip(
    root: StorageRootDep,
    path: Annotated[str, Query(description="Folder to zip (empty for everything)")] = "",
    user: AuthUser = Depends(get_current_user),
):
    """
    Download a folder as a zip archive.

    The archive is streamed while it is built. Missing folders and files
    are rejected before streaming starts; a read error after that aborts
    the connection.
    """
    rel = sanitize_rel_path(path)
    resolve_archive_target(root, rel)

    filename = safe_archive_name(rel)
    logger.info(f"Streaming zip of '{rel or '/'}' as {filename}")

    return StreamingResponse(
        iter_zip(root, rel),
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        }
    )
