"""
Pydantic schemas for uploaded reports.
The document itself lives in object storage; the backend stores its metadata.
"""

from pydantic import Field, field_validator
from typing import Optional

from housing_admin.schemas.common import CamelModel, EntityResponse


DOCUMENT_TYPE_NAMES = {
    "application/pdf": "PDF",
    "application/msword": "DOC",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "DOCX",
    "application/vnd.ms-excel": "XLS",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "XLSX",
}


def file_type_display_name(file_type: Optional[str]) -> str:
    """Short display name for a MIME type or extension ('PDF', 'DOCX', ...)."""
    if not file_type:
        return ""
    if file_type in DOCUMENT_TYPE_NAMES:
        return DOCUMENT_TYPE_NAMES[file_type]
    return file_type.rsplit("/", 1)[-1].lstrip(".").upper()


class DocumentMeta(CamelModel):
    """Reference to a stored report document."""

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    file_type: str = Field(..., description="MIME type of the document")


class ReportBase(CamelModel):
    title: str = Field(..., description="Report title")
    description: str = Field("", description="What the report covers")
    user_id: Optional[str] = Field(None, description="User the report belongs to")


class ReportCreate(ReportBase):
    """Payload for recording an uploaded report."""

    description: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    document: DocumentMeta

    @field_validator("title", "description")
    @classmethod
    def strip_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()


class ReportUpdate(CamelModel):
    """Partial update of report metadata."""

    title: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[str] = None
    document: Optional[DocumentMeta] = None


class ReportResponse(ReportBase, EntityResponse):
    """Report as returned by the backend."""

    title: str = ""
    document: Optional[DocumentMeta] = None

    @property
    def file_kind(self) -> str:
        """Lower-case short file type used by the type filter ('pdf', 'docx', ...)."""
        if self.document is None:
            return ""
        return file_type_display_name(self.document.file_type).lower()
