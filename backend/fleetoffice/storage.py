"""Filesystem storage for uploaded documents and photos."""
from __future__ import annotations

import logging
import re
import shutil
import time
from pathlib import Path, PurePosixPath

from .exceptions import FileValidationError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

DOCUMENT_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-outlook",
    }
)
DOCUMENT_EXTENSIONS = frozenset({"pdf", "jpg", "jpeg", "png", "webp", "doc", "docx", "msg"})
IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})
FILENAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-_.]+$")


def base_name(filename: str | None) -> str:
    """Strip any client-side directory part from an uploaded filename."""

    if not filename:
        return ""
    return PurePosixPath(filename.replace("\\", "/")).name


def extension_of(filename: str) -> str:
    _, dot, ext = filename.rpartition(".")
    return ext.lower() if dot else ""


class FileValidator:
    """Size, type and filename checks for uploads."""

    def __init__(self, max_document_size: int, max_image_size: int):
        self.max_document_size = max_document_size
        self.max_image_size = max_image_size

    def validate(self, filename: str | None, content_type: str | None, size: int, image: bool = False) -> str:
        """Validate an upload and return its sanitised base name."""

        name = base_name(filename)
        if size <= 0:
            raise FileValidationError("File is empty", name)
        if not name:
            raise FileValidationError("Filename is missing", name)
        if not FILENAME_PATTERN.match(name):
            raise FileValidationError("Filename contains invalid characters", name)

        limit = self.max_image_size if image else self.max_document_size
        if size > limit:
            raise FileValidationError(
                f"File exceeds the maximum size of {limit // (1024 * 1024)} MB", name
            )

        allowed_types = IMAGE_CONTENT_TYPES if image else DOCUMENT_CONTENT_TYPES
        allowed_extensions = IMAGE_EXTENSIONS if image else DOCUMENT_EXTENSIONS
        if (content_type or "").lower() not in allowed_types:
            raise FileValidationError(f"File type not allowed: {content_type}", name)
        if extension_of(name) not in allowed_extensions:
            raise FileValidationError(f"File extension not allowed: {extension_of(name)}", name)
        return name


class FileStorage:
    """Stores files below a root directory and resolves them back safely."""

    def __init__(self, root: str | Path, validator: FileValidator):
        self.root = Path(root).resolve()
        self.validator = validator

    def _inside_root(self, path: Path) -> Path:
        resolved = path.resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise FileValidationError("Path escapes the storage root", str(path))
        return resolved

    def init_directory(self, subdir: str) -> Path:
        """Create (if needed) and return the directory for an owner."""

        directory = self._inside_root(self.root / subdir)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not create directory: {exc}", subdir) from exc
        return directory

    def store(
        self,
        subdir: str,
        filename: str | None,
        data: bytes,
        content_type: str | None,
        image: bool = False,
    ) -> str:
        """Validate and write ``data``; return the path relative to the root."""

        name = self.validator.validate(filename, content_type, len(data), image=image)
        directory = self.init_directory(subdir)
        stamp = int(time.time() * 1000)
        while True:
            target = directory / f"{stamp}_{name}"
            try:
                with target.open("xb") as handle:
                    handle.write(data)
                break
            except FileExistsError:
                stamp += 1
            except OSError as exc:
                raise StorageError(f"Could not store file: {exc}", str(target)) from exc
        relative = target.relative_to(self.root).as_posix()
        logger.info("Stored %s (%s bytes)", relative, len(data))
        return relative

    def resolve(self, relative_path: str) -> Path:
        """Return the absolute path of a stored file; it must exist and stay under the root."""

        path = self._inside_root(self.root / relative_path)
        if not path.is_file():
            raise NotFoundError("File", relative_path)
        return path

    def resolve_in(self, subdir: str, filename: str) -> Path:
        """Resolve ``filename`` against an owner directory."""

        directory = self._inside_root(self.root / subdir)
        path = self._inside_root(directory / filename)
        if directory not in path.parents:
            raise FileValidationError("Path escapes the owner directory", filename)
        if not path.is_file():
            raise NotFoundError("File", filename)
        return path

    def delete(self, relative_path: str | None) -> bool:
        """Best-effort removal of a stored file."""

        if not relative_path:
            return False
        try:
            path = self._inside_root(self.root / relative_path)
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except (OSError, FileValidationError) as exc:
            logger.warning("Could not delete file %s: %s", relative_path, exc)
            return False

    def delete_directory(self, subdir: str) -> None:
        """Best-effort recursive removal of an owner directory."""

        try:
            directory = self._inside_root(self.root / subdir)
        except FileValidationError as exc:
            logger.warning("Refusing to delete %s: %s", subdir, exc.message)
            return
        if directory == self.root or not directory.exists():
            return
        try:
            shutil.rmtree(directory)
        except OSError as exc:
            logger.warning("Could not delete directory %s: %s", subdir, exc)
