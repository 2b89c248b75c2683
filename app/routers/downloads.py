# =============================================================================
# app/routers/downloads.py - Authenticated File Downloads
# =============================================================================
# Serves stored files at /uploads/<path>, the URLs handed out by the listing
# and the upload endpoint.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.auth import get_current_user, AuthUser
from app.dependencies import StorageRootDep
from app.exceptions import InvalidPathError, NotFoundError
from lib.paths import resolve_within_root

logger = logging.getLogger(__name__)

router = APIRouter()

# Browsers may cache downloads for an hour
CACHE_CONTROL = "private, max-age=3600"


@router.get("/uploads/{file_path:path}")
async def download_file(
    file_path: str,
    root: StorageRootDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Download a single stored file.

    Hidden files, symlinks, folders and anything outside the storage root
    are answered with 404, the same as a missing file.
    """
    segments = [s for s in file_path.replace("\\", "/").split("/") if s]
    if any(segment.startswith(".") for segment in segments):
        raise NotFoundError(file_path)

    # Symlinks are never listed or archived, so they aren't served either
    current = root
    for segment in segments:
        current = current / segment
        if current.is_symlink():
            raise NotFoundError(file_path)

    try:
        target = resolve_within_root(root, file_path)
    except InvalidPathError:
        logger.warning(f"Blocked download outside storage root: {file_path}")
        raise NotFoundError(file_path)

    if not target.is_file():
        raise NotFoundError(file_path)

    return FileResponse(
        target,
        filename=target.name,
        content_disposition_type="inline",
        headers={"Cache-Control": CACHE_CONTROL},
    )
