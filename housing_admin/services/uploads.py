"""
Upload service for property photos, listing images and report documents.
Files are checked locally, stored in object storage one at a time, and
referenced from backend records by their public URL.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from housing_admin.clients.storage import ObjectStorageClient
from housing_admin.config import Settings, get_settings
from housing_admin.schemas.house import Photo
from housing_admin.schemas.report import DocumentMeta
from housing_admin.utils.exceptions import APIException
from housing_admin.utils.file_utils import (
    FileUpload,
    FileValidator,
    build_object_key,
    to_data_url
)

logger = logging.getLogger(__name__)


@dataclass
class UploadFailure:
    """One file that could not be stored."""

    filename: str
    message: str


@dataclass
class UploadBatch:
    """Outcome of a multi-file upload."""

    uploaded: List[Photo] = field(default_factory=list)
    failures: List[UploadFailure] = field(default_factory=list)

    @property
    def urls(self) -> List[str]:
        return [photo.url for photo in self.uploaded]

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


class UploadService:
    """
    Stores files for the console.
    Validation happens before any bytes leave the process.
    """

    def __init__(self, storage: ObjectStorageClient, settings: Optional[Settings] = None):
        self.storage = storage
        self.settings = settings or get_settings()

    async def upload_photo(self, upload: FileUpload, folder: str, prefix: str = "photo") -> Photo:
        """
        Validate and store one image.

        Raises:
            FileUploadError: If the file is not an acceptable image
            BackendError: If storage rejects the upload
        """
        FileValidator.validate_photo(upload, self.settings.max_file_size, self.settings.allowed_photo_types)
        key = build_object_key(folder, upload, prefix)
        url = await self.storage.upload(self.settings.photo_bucket, key, upload.content, upload.content_type)
        return Photo(name=upload.filename, url=url)

    async def upload_photos(self, uploads: Sequence[FileUpload], folder: str) -> UploadBatch:
        """
        Store several images one after another.

        A failing file is logged and recorded; the remaining files are still
        uploaded.

        Args:
            uploads: Files in display order
            folder: Storage folder (listing title, address or owner id)

        Returns:
            Stored photos and per-file failures
        """
        batch = UploadBatch()
        for upload in uploads:
            try:
                photo = await self.upload_photo(upload, folder)
            except APIException as e:
                logger.error(
                    f"Failed to upload photo {upload.filename}: {e.detail}",
                    extra={"filename": upload.filename, "folder": folder}
                )
                batch.failures.append(UploadFailure(upload.filename, str(e.detail)))
                continue
            batch.uploaded.append(photo)

        logger.info(
            f"Uploaded {len(batch.uploaded)} of {len(uploads)} photos to {folder}"
        )
        return batch

    async def upload_document(self, upload: FileUpload, user_id: str) -> DocumentMeta:
        """
        Validate and store a report document under the owning user's folder.

        Raises:
            UnsupportedFileTypeError: If the document type is not accepted
            FileSizeExceededError: If the document is over the size limit
            BackendError: If storage rejects the upload
        """
        FileValidator.validate_document(upload, self.settings.max_file_size, self.settings.allowed_document_types)
        key = build_object_key(user_id, upload, "report")
        url = await self.storage.upload(self.settings.report_bucket, key, upload.content, upload.content_type)
        logger.info(f"Uploaded report document {upload.filename} for user {user_id}")
        return DocumentMeta(name=upload.filename, url=url, file_type=upload.content_type)

    def preview(self, uploads: Sequence[FileUpload]) -> List[str]:
        """
        Data-URL previews for images, validated but not stored.

        Raises:
            FileUploadError: If any file is not an acceptable image
        """
        previews = []
        for upload in uploads:
            FileValidator.validate_photo(upload, self.settings.max_file_size, self.settings.allowed_photo_types)
            previews.append(to_data_url(upload))
        return previews
