"""
Property listing endpoints with optional cover image upload.
"""

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from typing import Optional

from housing_admin.schemas.common import MessageResponse, PreviewResponse, ResourceListResponse
from housing_admin.schemas.error import (
    get_crud_error_responses,
    get_delete_error_responses,
    get_read_error_responses
)
from housing_admin.schemas.listing import ListingResponse
from housing_admin.services.listings import ListingService
from housing_admin.services.uploads import UploadService
from housing_admin.utils.dependencies import get_listing_service, get_upload_service
from housing_admin.utils.file_utils import FileUpload
from housing_admin.utils.validators import ValidationUtils


router = APIRouter(prefix="/listings", tags=["Property Listings"])


async def _read_image(image: Optional[UploadFile]) -> Optional[FileUpload]:
    if image is None:
        return None
    return await FileUpload.from_upload_file(image)


@router.get(
    "",
    response_model=ResourceListResponse[ListingResponse],
    summary="List property listings",
    description="Listings narrowed by a search over title and location, and by type ('All' disables the filter).",
    responses=get_read_error_responses()
)
async def list_listings(
    search: Optional[str] = Query(None, description="Search term"),
    listing_type: Optional[str] = Query(None, alias="type", description="Apartment, House, Condo, Townhouse, Penthouse or All"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ResourceListResponse:
    return await listing_service.list(search=search, filter_value=listing_type)


@router.post(
    "/image/preview",
    response_model=PreviewResponse,
    summary="Preview listing image",
    responses=get_crud_error_responses()
)
async def preview_image(
    image: UploadFile = File(..., description="Cover image"),
    upload_service: UploadService = Depends(get_upload_service)
) -> PreviewResponse:
    upload = await FileUpload.from_upload_file(image)
    return PreviewResponse(previews=upload_service.preview([upload]))


@router.get(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Get listing",
    responses=get_read_error_responses()
)
async def get_listing(
    listing_id: str = Path(..., description="Listing ID"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    return await listing_service.get(listing_id)


@router.post(
    "",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create listing",
    description="Multipart: a JSON `payload` form field and an optional cover `image`.",
    responses=get_crud_error_responses()
)
async def create_listing(
    payload: str = Form(..., description="Listing form as a JSON object"),
    image: Optional[UploadFile] = File(None, description="Cover image"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    """
    Publish a listing.

    Args:
        payload: JSON object with title, price, location, type and the rest
        image: Optional cover image, stored before the listing is created
        listing_service: Listing service

    Returns:
        Created listing
    """
    data = ValidationUtils.parse_json_object(payload)
    return await listing_service.publish(data, await _read_image(image))


@router.put(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Update listing",
    description="Multipart: a JSON `payload` with changed fields and an optional replacement `image`.",
    responses=get_crud_error_responses()
)
async def update_listing(
    listing_id: str = Path(..., description="Listing ID"),
    payload: str = Form("{}", description="Changed listing fields as a JSON object"),
    image: Optional[UploadFile] = File(None, description="Replacement cover image"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    data = ValidationUtils.parse_json_object(payload)
    return await listing_service.revise(listing_id, data, await _read_image(image))


@router.delete(
    "/{listing_id}",
    response_model=MessageResponse,
    summary="Delete listing",
    description="Delete a listing. Requires confirm=true.",
    responses=get_delete_error_responses()
)
async def delete_listing(
    listing_id: str = Path(..., description="Listing ID"),
    confirm: bool = Query(False, description="Explicit confirmation of the delete"),
    listing_service: ListingService = Depends(get_listing_service)
) -> MessageResponse:
    await listing_service.delete(listing_id, confirm)
    return MessageResponse(message="Listing deleted")
