"""
Local-disk upload store for profile images and resumes.

Files are streamed in chunks under UPLOAD_DIR/<folder>/<uuid><ext> with a hard
size ceiling. Routes use `staged()` so an upload whose owning record is never
persisted gets deleted again.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional
from uuid import uuid4

from fastapi import UploadFile

from jobboard.core import config
from jobboard.core.errors import PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
RESUME_EXTENSIONS = {".pdf", ".doc", ".docx"}
CHUNK_SIZE = 1024 * 1024


class UploadStore:
    def __init__(self, base_dir: str, max_bytes: int):
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes

    def store(self, file: UploadFile, folder: str, allowed_extensions: Optional[Iterable[str]] = None) -> str:
        """
        Persist an upload and return its reference (a path relative to the app root).

        Raises:
            ValidationError: extension not allowed
            PayloadTooLargeError: file exceeds max_bytes
        """
        original_name = Path(file.filename or "").name
        ext = Path(original_name).suffix.lower()
        if allowed_extensions is not None and ext not in allowed_extensions:
            raise ValidationError(f"Unsupported file type '{ext or original_name}'")

        target_dir = self.base_dir / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        dest = target_dir / f"{uuid4().hex}{ext}"

        size = 0
        try:
            with open(dest, "wb") as out:
                while True:
                    chunk = file.file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise PayloadTooLargeError(
                            f"File too large (max {self.max_bytes // (1024 * 1024)}MB)"
                        )
                    out.write(chunk)
        except Exception:
            dest.unlink(missing_ok=True)
            raise

        reference = dest.as_posix()
        logger.info(f"Upload stored: {reference} ({size} bytes, original={original_name})")
        return reference

    def discard(self, reference: Optional[str]) -> None:
        """Delete a stored upload; references outside base_dir are ignored."""
        if not reference:
            return
        path = Path(reference)
        try:
            path.resolve().relative_to(self.base_dir.resolve())
        except ValueError:
            logger.warning(f"Refusing to delete upload outside {self.base_dir}: {reference}")
            return
        try:
            path.unlink(missing_ok=True)
            logger.info(f"Upload discarded: {reference}")
        except OSError as e:
            logger.error(f"Failed to discard upload {reference}: {e}")

    @contextmanager
    def staged(
        self,
        file: Optional[UploadFile],
        folder: str,
        allowed_extensions: Optional[Iterable[str]] = None,
    ) -> Iterator[Optional[str]]:
        """Store `file` (if any) and delete it again if the block raises."""
        reference = self.store(file, folder, allowed_extensions) if file is not None else None
        try:
            yield reference
        except BaseException:
            self.discard(reference)
            raise


_default_store: Optional[UploadStore] = None


def get_upload_store() -> UploadStore:
    global _default_store
    if _default_store is None:
        _default_store = UploadStore(config.UPLOAD_DIR, config.MAX_UPLOAD_BYTES)
    return _default_store
