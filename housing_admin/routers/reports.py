"""
Report endpoints: upload documents, list, filter by file type, delete.
"""

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from typing import Optional

from housing_admin.schemas.common import MessageResponse, ResourceListResponse
from housing_admin.schemas.error import (
    get_crud_error_responses,
    get_delete_error_responses,
    get_read_error_responses
)
from housing_admin.schemas.report import ReportResponse
from housing_admin.services.reports import ReportService
from housing_admin.utils.dependencies import get_report_service
from housing_admin.utils.file_utils import FileUpload


router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "",
    response_model=ResourceListResponse[ReportResponse],
    summary="List reports",
    description="Reports narrowed by a search over title, description and file name, and by file type (pdf, doc, docx, xls, xlsx or all).",
    responses=get_read_error_responses()
)
async def list_reports(
    search: Optional[str] = Query(None, description="Search term"),
    file_type: Optional[str] = Query(None, description="File type filter"),
    report_service: ReportService = Depends(get_report_service)
) -> ResourceListResponse:
    return await report_service.list(search=search, filter_value=file_type)


@router.get(
    "/{report_id}",
    response_model=ReportResponse,
    summary="Get report",
    responses=get_read_error_responses()
)
async def get_report(
    report_id: str = Path(..., description="Report ID"),
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    return await report_service.get(report_id)


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload report",
    description="Store a PDF, Word or Excel document (10MB max) and record it for a user.",
    responses=get_crud_error_responses()
)
async def upload_report(
    file: UploadFile = File(..., description="Report document"),
    description: str = Form("", description="What the report covers"),
    user_id: str = Form("", alias="userId", description="User the report belongs to"),
    title: Optional[str] = Form(None, description="Title; defaults to the file name"),
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """
    Upload a report document.

    Args:
        file: Document to store
        description: Report description
        user_id: Owning user
        title: Optional title
        report_service: Report service

    Returns:
        Created report

    Raises:
        ValidationError: If description or user is missing; nothing is uploaded
        UnsupportedFileTypeError: If the document type is not accepted
        FileSizeExceededError: If the document is larger than allowed
    """
    data = {"description": description, "user_id": user_id}
    if title:
        data["title"] = title
    upload = await FileUpload.from_upload_file(file)
    return await report_service.upload(data, upload)


@router.delete(
    "/{report_id}",
    response_model=MessageResponse,
    summary="Delete report",
    description="Delete a report. Requires confirm=true.",
    responses=get_delete_error_responses()
)
async def delete_report(
    report_id: str = Path(..., description="Report ID"),
    confirm: bool = Query(False, description="Explicit confirmation of the delete"),
    report_service: ReportService = Depends(get_report_service)
) -> MessageResponse:
    await report_service.delete(report_id, confirm)
    return MessageResponse(message="Report deleted")
