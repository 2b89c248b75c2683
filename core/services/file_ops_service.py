# =============================================================================
# core/services/file_ops_service.py - Storage Mutations
# =============================================================================
# Upload placement, delete, folder creation and move under the storage root.
#
# Every input is sanitized (idempotent, so already-clean paths pass through
# unchanged) and the resolved target is checked against the root right
# before the filesystem call.
#
# Mutations address the named entry itself: a symlink is deleted, moved or
# replaced as a link, its target is never touched. The staging folder for
# in-flight uploads can't be the target of any mutation.
#
# There is no locking: concurrent conflicting requests race, and the last
# rename/delete wins. Moves are renames, atomic on a single volume only.
# =============================================================================

import logging
import shutil
from pathlib import Path

from app.exceptions import (
    FileTooLargeError,
    InvalidPathError,
    InvalidTargetError,
    NotFoundError,
    StorageIOError,
)
from core.models.files import SavedFile
from lib.paths import (
    build_download_url,
    is_within,
    resolve_entry_within_root,
    resolve_within_root,
    sanitize_rel_path,
)

logger = logging.getLogger(__name__)

# Default per-file upload cap (50 MiB)
DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


class FileOpsService:
    """
    Service for filesystem mutations under one storage root.

    Example:
        ops = FileOpsService(Path("/srv/uploads"))
        ops.create_folder("photos/2024")
        ops.move("photos/2024", "archive/photos-2024")
    """

    def __init__(
        self,
        root: Path,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        staging_dir: Path | None = None,
    ):
        self.root = Path(root)
        self.max_upload_bytes = max_upload_bytes
        self.staging_dir = Path(staging_dir).resolve() if staging_dir else None

    def _require_path(self, raw: str | None) -> str:
        """Sanitize a path that must not point at the root itself."""
        rel = sanitize_rel_path(raw)
        if not rel:
            raise InvalidPathError(raw or "")
        return rel

    def _entry(self, rel: str) -> Path:
        """Confined path of a named entry, refusing the staging folder."""
        target = resolve_entry_within_root(self.root, rel)
        self._check_not_staging(rel, target)
        return target

    def _check_not_staging(self, rel: str, target: Path) -> None:
        staging = self.staging_dir
        if staging and (is_within(staging, target) or is_within(target, staging)):
            logger.warning(f"Refused operation on the staging folder: {rel}")
            raise InvalidPathError(rel, reason="Path is reserved for incoming uploads")

    # -------------------------------------------------------------------------
    # Upload
    # -------------------------------------------------------------------------

    def upload(self, target_path: str, source_temporary_path: Path, size_bytes: int) -> SavedFile:
        """
        Move a fully received upload into place.

        The size is checked before anything under the root is touched. A
        symlink at the target is replaced by the uploaded file.

        Args:
            target_path: Where the file should live, relative to the root
            source_temporary_path: Staged file holding the upload
            size_bytes: Size of the upload

        Returns:
            SavedFile descriptor

        Raises:
            FileTooLargeError: If size_bytes exceeds the cap
            InvalidPathError: If the target is empty after sanitizing, or
                lies in the staging folder
            InvalidTargetError: If a folder already exists at the target
            StorageIOError: If the file can't be placed
        """
        if size_bytes > self.max_upload_bytes:
            logger.warning(f"Rejected upload of {size_bytes} bytes to '{target_path}'")
            raise FileTooLargeError(size_bytes, self.max_upload_bytes)

        rel = self._require_path(target_path)
        target = self._entry(rel)

        # shutil.move would drop the file inside an existing folder
        if target.is_dir() and not target.is_symlink():
            raise InvalidTargetError(rel, reason="A folder already exists at this path")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # A cross-volume move copies through the link, so drop it first
            if target.is_symlink():
                target.unlink()
            shutil.move(str(source_temporary_path), str(target))
        except OSError as e:
            logger.error(f"Upload handling failed for '{rel}': {e}")
            raise StorageIOError("save file", str(e))

        logger.info(f"Stored upload: {rel} ({size_bytes} bytes)")
        return SavedFile(
            name=target.name,
            path=rel,
            size=size_bytes,
            url=build_download_url(rel),
        )

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(self, path: str) -> None:
        """
        Delete a file, or a folder with everything in it.

        A symlink is removed as a link; whatever it points to stays.

        Raises:
            InvalidPathError: If the path is empty (the root is never deleted)
                or lies in the staging folder
            NotFoundError: If nothing exists at the path
            StorageIOError: On any other filesystem error
        """
        rel = self._require_path(path)
        target = self._entry(rel)

        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except FileNotFoundError:
            raise NotFoundError(rel)
        except OSError as e:
            logger.error(f"Could not delete '{rel}': {e}")
            raise StorageIOError("delete file", str(e))

        logger.info(f"Deleted: {rel}")

    # -------------------------------------------------------------------------
    # Folders
    # -------------------------------------------------------------------------

    def create_folder(self, path: str) -> None:
        """
        Create a folder and any missing parents.

        Idempotent: an existing folder is left as it is.

        Raises:
            InvalidPathError: If the path is empty or lies in the staging folder
            StorageIOError: If the folder can't be created (e.g. a file is in the way)
        """
        rel = self._require_path(path)
        target = resolve_within_root(self.root, rel)
        self._check_not_staging(rel, target)

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create folder '{rel}': {e}")
            raise StorageIOError("create folder", str(e))

        logger.info(f"Created folder: {rel}")

    # -------------------------------------------------------------------------
    # Move
    # -------------------------------------------------------------------------

    def move(self, from_path: str, to_path: str) -> None:
        """
        Move (rename) a file or folder, creating the destination's parents.

        A symlink is moved as a link.

        Raises:
            InvalidPathError: If either path is empty or lies in the staging
                folder, or the destination is inside the source
            NotFoundError: If the source doesn't exist
            StorageIOError: On any other filesystem error
        """
        rel_from = self._require_path(from_path)
        rel_to = self._require_path(to_path)

        src = self._entry(rel_from)
        dest = self._entry(rel_to)

        if src != dest and is_within(src, dest):
            raise InvalidPathError(rel_to, reason="Cannot move a folder into itself")

        if not (src.exists() or src.is_symlink()):
            raise NotFoundError(rel_from, what="Source")

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            src.rename(dest)
        except FileNotFoundError:
            raise NotFoundError(rel_from, what="Source")
        except OSError as e:
            logger.error(f"Could not move '{rel_from}' to '{rel_to}': {e}")
            raise StorageIOError("move item", str(e))

        logger.info(f"Moved: {rel_from} -> {rel_to}")
