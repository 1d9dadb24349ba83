"""
File upload utilities for photos and report documents.
Provides client-side validation, previews and object key generation.
"""

import base64
import io
import mimetypes
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from housing_admin.config import get_settings
from housing_admin.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError
)

settings = get_settings()


@dataclass
class FileUpload:
    """A file selected for upload, fully read into memory."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot, guessed from the MIME type when the name has none."""
        suffix = Path(self.filename).suffix.lower().lstrip(".")
        if suffix:
            return suffix
        guessed = mimetypes.guess_extension(self.content_type or "") or ""
        return guessed.lstrip(".")

    @classmethod
    async def from_upload_file(cls, file: UploadFile) -> "FileUpload":
        """Read a multipart upload received by the console API."""
        await file.seek(0)
        content = await file.read()
        await file.seek(0)
        return cls(
            filename=file.filename or "upload",
            content_type=file.content_type or "application/octet-stream",
            content=content,
        )

    @classmethod
    async def from_path(cls, path: str, content_type: Optional[str] = None) -> "FileUpload":
        """Read a local file; the MIME type is guessed from its name when not given."""
        file_path = Path(path)
        async with aiofiles.open(file_path, "rb") as f:
            content = await f.read()
        guessed = content_type or mimetypes.guess_type(str(file_path))[0] or "application/octet-stream"
        return cls(filename=file_path.name, content_type=guessed, content=content)


class FileValidator:
    """Utility class for file validation operations."""

    # Pillow format names accepted for each image MIME type
    IMAGE_FORMATS = {
        "image/jpeg": ["jpeg", "mpo"],
        "image/png": ["png"],
        "image/webp": ["webp"],
        "image/gif": ["gif"],
    }

    @classmethod
    def validate_mime_type(cls, mime_type: str, allowed_types: Iterable[str]) -> str:
        """
        Validate MIME type.

        Args:
            mime_type: MIME type to validate
            allowed_types: Accepted MIME types

        Returns:
            Validated MIME type

        Raises:
            UnsupportedFileTypeError: If the MIME type is not accepted
        """
        allowed = list(allowed_types)
        if not mime_type or mime_type not in allowed:
            raise UnsupportedFileTypeError(mime_type or "unknown", allowed)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Args:
            file_size: Size of the file in bytes
            max_size: Maximum allowed size in bytes (defaults to settings)

        Returns:
            Validated file size

        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If the file is larger than allowed
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)

        return file_size

    @classmethod
    def verify_image(cls, upload: FileUpload) -> None:
        """
        Check that the bytes decode as an image of the declared type.

        Raises:
            FileUploadError: If Pillow cannot read the image or its format differs
        """
        try:
            with Image.open(io.BytesIO(upload.content)) as img:
                pil_format = (img.format or "").lower()
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file '{upload.filename}': {e}")

        expected = cls.IMAGE_FORMATS.get(upload.content_type)
        if expected and pil_format not in expected:
            raise FileUploadError(
                f"Image format '{pil_format}' doesn't match MIME type '{upload.content_type}'"
            )

    @classmethod
    def validate_photo(
        cls,
        upload: FileUpload,
        max_size: Optional[int] = None,
        allowed_types: Optional[Iterable[str]] = None
    ) -> FileUpload:
        """Validate a property photo: type, size, then image content."""
        cls.validate_mime_type(upload.content_type, allowed_types or settings.allowed_photo_types)
        cls.validate_file_size(upload.size, max_size)
        cls.verify_image(upload)
        return upload

    @classmethod
    def validate_document(
        cls,
        upload: FileUpload,
        max_size: Optional[int] = None,
        allowed_types: Optional[Iterable[str]] = None
    ) -> FileUpload:
        """Validate a report document: type and size."""
        cls.validate_mime_type(upload.content_type, allowed_types or settings.allowed_document_types)
        cls.validate_file_size(upload.size, max_size)
        return upload


def to_data_url(upload: FileUpload) -> str:
    """Inline preview of a file as a data: URL."""
    encoded = base64.b64encode(upload.content).decode("ascii")
    return f"data:{upload.content_type};base64,{encoded}"


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def sanitize_folder(name: Optional[str], fallback: str = "untitled") -> str:
    """Make a title, address or id safe to use as a storage folder name."""
    cleaned = _UNSAFE_KEY_CHARS.sub("_", (name or "").strip()).strip("_")
    return cleaned[:100] or fallback


def build_object_key(folder: str, upload: FileUpload, prefix: str = "file") -> str:
    """
    Generate a unique storage key for an upload.

    Args:
        folder: Folder name (sanitized here)
        upload: File being stored; its extension is kept
        prefix: Leading part of the file name

    Returns:
        Key shaped `{folder}/{prefix}_{epoch_ms}_{random}.{ext}`
    """
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4)
    name = f"{prefix}_{timestamp}_{random_part}"
    if upload.extension:
        name = f"{name}.{upload.extension}"
    return f"{sanitize_folder(folder)}/{name}"
