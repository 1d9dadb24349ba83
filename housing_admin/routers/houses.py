"""
House registration endpoints: registration with photos, review status,
detail tabs, search and filtering.
"""

from fastapi import APIRouter, Body, Depends, File, Form, Path, Query, UploadFile, status
from typing import Any, Dict, List, Optional

from housing_admin.schemas.common import MessageResponse, PreviewResponse, ResourceListResponse, UploadFailureResponse
from housing_admin.schemas.error import (
    get_crud_error_responses,
    get_delete_error_responses,
    get_read_error_responses
)
from housing_admin.schemas.house import (
    HouseDetailResponse,
    HouseResponse,
    RegistrationResult,
    StatusUpdate
)
from housing_admin.services.registration import RegistrationService
from housing_admin.services.uploads import UploadBatch, UploadService
from housing_admin.utils.dependencies import get_registration_service, get_upload_service
from housing_admin.utils.file_utils import FileUpload
from housing_admin.utils.validators import ValidationUtils


router = APIRouter(prefix="/houses", tags=["House Registrations"])


async def _read_uploads(files: Optional[List[UploadFile]]) -> List[FileUpload]:
    return [await FileUpload.from_upload_file(file) for file in (files or [])]


def _result(house: HouseResponse, batch: UploadBatch) -> RegistrationResult:
    return RegistrationResult(
        house=house,
        uploaded=batch.uploaded,
        failed_uploads=[
            UploadFailureResponse(filename=failure.filename, message=failure.message)
            for failure in batch.failures
        ],
    )


@router.get(
    "",
    response_model=ResourceListResponse[HouseResponse],
    summary="List house registrations",
    description="Registrations narrowed by a search over address, owner and ID, and by status ('All' disables the filter).",
    responses=get_read_error_responses()
)
async def list_houses(
    search: Optional[str] = Query(None, description="Search term"),
    status_filter: Optional[str] = Query(None, alias="status", description="Pending, Approved, Rejected, Needs Documents or All"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> ResourceListResponse:
    """
    List registrations for the property management table.

    Args:
        search: Case-insensitive substring
        status_filter: Exact status, case-insensitive
        registration_service: Registration service

    Returns:
        Matching rows with totals and per-status counts
    """
    return await registration_service.list(search=search, filter_value=status_filter)


@router.get(
    "/stats",
    response_model=Dict[str, int],
    summary="Registration counts per status",
    responses=get_read_error_responses()
)
async def house_stats(
    registration_service: RegistrationService = Depends(get_registration_service)
) -> Dict[str, int]:
    return await registration_service.stats()


@router.post(
    "/photos/preview",
    response_model=PreviewResponse,
    summary="Preview photos",
    description="Validate images and return data URLs without storing them.",
    responses=get_crud_error_responses()
)
async def preview_photos(
    photos: List[UploadFile] = File(..., description="Images to preview"),
    upload_service: UploadService = Depends(get_upload_service)
) -> PreviewResponse:
    uploads = await _read_uploads(photos)
    return PreviewResponse(previews=upload_service.preview(uploads))


@router.get(
    "/{house_id}",
    response_model=HouseResponse,
    summary="Get house registration",
    responses=get_read_error_responses()
)
async def get_house(
    house_id: str = Path(..., description="Registration ID"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> HouseResponse:
    return await registration_service.get(house_id)


@router.get(
    "/{house_id}/detail",
    response_model=HouseDetailResponse,
    summary="Registration detail view",
    description="Registration grouped into overview, details, photos, owner and management tabs.",
    responses=get_read_error_responses()
)
async def get_house_detail(
    house_id: str = Path(..., description="Registration ID"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> HouseDetailResponse:
    return await registration_service.detail(house_id)


@router.post(
    "",
    response_model=RegistrationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Register house",
    description=(
        "Multipart registration: a JSON `payload` form field plus any number of `photos`. "
        "Photos that fail are reported; the registration is saved with the rest."
    ),
    responses=get_crud_error_responses()
)
async def register_house(
    payload: str = Form(..., description="Registration form as a JSON object"),
    photos: Optional[List[UploadFile]] = File(None, description="Property photos"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> RegistrationResult:
    """
    Register a house with photos.

    Args:
        payload: JSON object with the registration fields
        photos: Property photos
        registration_service: Registration service

    Returns:
        Created registration plus uploaded and failed photos

    Raises:
        ValidationError: If the form is invalid; nothing is uploaded or sent
    """
    data = ValidationUtils.parse_json_object(payload)
    house, batch = await registration_service.register(data, await _read_uploads(photos))
    return _result(house, batch)


@router.put(
    "/{house_id}",
    response_model=HouseResponse,
    summary="Update house registration",
    responses=get_crud_error_responses()
)
async def update_house(
    house_id: str = Path(..., description="Registration ID"),
    data: Dict[str, Any] = Body(..., description="Changed registration fields"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> HouseResponse:
    house, _ = await registration_service.update_registration(house_id, data)
    return house


@router.post(
    "/{house_id}/photos",
    response_model=RegistrationResult,
    summary="Add photos to a registration",
    responses=get_crud_error_responses()
)
async def add_house_photos(
    house_id: str = Path(..., description="Registration ID"),
    photos: List[UploadFile] = File(..., description="Property photos"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> RegistrationResult:
    house, batch = await registration_service.update_registration(house_id, {}, await _read_uploads(photos))
    return _result(house, batch)


@router.put(
    "/{house_id}/status",
    response_model=HouseResponse,
    summary="Change registration status",
    description="Apply a review status immediately. No confirmation is asked.",
    responses=get_crud_error_responses()
)
async def change_house_status(
    status_update: StatusUpdate,
    house_id: str = Path(..., description="Registration ID"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> HouseResponse:
    return await registration_service.change_status(house_id, status_update.status)


@router.delete(
    "/{house_id}",
    response_model=MessageResponse,
    summary="Delete house registration",
    description="Delete a registration. Requires confirm=true.",
    responses=get_delete_error_responses()
)
async def delete_house(
    house_id: str = Path(..., description="Registration ID"),
    confirm: bool = Query(False, description="Explicit confirmation of the delete"),
    registration_service: RegistrationService = Depends(get_registration_service)
) -> MessageResponse:
    await registration_service.delete(house_id, confirm)
    return MessageResponse(message="House deleted")
