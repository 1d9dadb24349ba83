"""
Report service: upload a document, then record it with the backend.
"""

import logging
from typing import Any, Mapping

from housing_admin.clients import ConsoleClients
from housing_admin.schemas.report import ReportResponse
from housing_admin.services.base import ResourceService, normalize_form_data
from housing_admin.services.resources import REPORTS
from housing_admin.services.uploads import UploadService
from housing_admin.utils.file_utils import FileUpload
from housing_admin.utils.validators import raise_for_errors

logger = logging.getLogger(__name__)


class ReportService(ResourceService):
    """Reports page operations."""

    def __init__(self, clients: ConsoleClients, uploads: UploadService):
        super().__init__(clients, REPORTS)
        self.uploads = uploads

    async def upload(self, data: Mapping[str, Any], file: FileUpload) -> ReportResponse:
        """
        Store a report document and create the report record.

        The title defaults to the file name. Title, description and user
        are checked before the file is uploaded.

        Raises:
            ValidationError: If a required field is missing; nothing is uploaded
            UnsupportedFileTypeError: If the document type is not accepted
            FileSizeExceededError: If the document is too large
            BackendError: If storage or the backend fails
        """
        form = self.new_form()
        form.open_create({"title": file.filename})
        form.update_fields(normalize_form_data(data))

        # The document is attached after upload; check everything else first
        errors = form.validate()
        errors.pop("document", None)
        raise_for_errors(errors)

        document = await self.uploads.upload_document(file, form.draft["user_id"])
        form.set_field("document", document.model_dump())

        report = await form.submit()
        logger.info(f"Uploaded report {report.id} ({document.file_type}) for user {report.user_id}")
        return report
