# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Settings are read here, once, and handed to the services explicitly.
# Tests swap any of these out via app.dependency_overrides.
# =============================================================================

from pathlib import Path
from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services.credential_service import CredentialStore
from core.services.file_ops_service import FileOpsService


def get_storage_root() -> Path:
    """Absolute storage root."""
    return settings.storage_root


def get_staging_dir() -> Path:
    """Directory where uploads are received before being placed."""
    return settings.staging_dir


def get_max_upload_bytes() -> int:
    """Per-file upload cap in bytes."""
    return settings.max_upload_size_bytes


def get_file_ops_service(
    root: Annotated[Path, Depends(get_storage_root)],
    max_upload_bytes: Annotated[int, Depends(get_max_upload_bytes)],
    staging_dir: Annotated[Path, Depends(get_staging_dir)],
) -> FileOpsService:
    """
    Get a FileOpsService bound to the storage root.

    The service is stateless apart from its root, so a fresh one per
    request is fine. The staging folder is passed so that it can't be
    deleted or moved while uploads land in it.
    """
    return FileOpsService(root, max_upload_bytes=max_upload_bytes, staging_dir=staging_dir)


def get_credential_store() -> CredentialStore:
    """
    Get the credential store configured from settings.
    """
    return CredentialStore(
        creds_path=settings.creds_path,
        secret=settings.AUTH_SECRET,
        admin_username=settings.ADMIN_USERNAME,
        admin_password=settings.ADMIN_PASSWORD,
        token_ttl_hours=settings.TOKEN_TTL_HOURS,
    )


# Type aliases for dependency injection
StorageRootDep = Annotated[Path, Depends(get_storage_root)]
StagingDirDep = Annotated[Path, Depends(get_staging_dir)]
FileOpsDep = Annotated[FileOpsService, Depends(get_file_ops_service)]
CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]
