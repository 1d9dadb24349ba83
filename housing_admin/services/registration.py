"""
House registration service.
Handles photo upload with registration submit, the detail tabs and
admin-triggered status changes.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from housing_admin.clients import ConsoleClients
from housing_admin.schemas.house import HouseDetailResponse, HouseResponse, RegistrationStatus, parse_status
from housing_admin.services.base import ResourceService, normalize_form_data
from housing_admin.services.resources import HOUSES
from housing_admin.services.status import StatusLifecycle
from housing_admin.services.uploads import UploadBatch, UploadService
from housing_admin.utils.file_utils import FileUpload
from housing_admin.utils.validators import raise_for_errors

logger = logging.getLogger(__name__)


class RegistrationService(ResourceService):
    """
    House registration management with photo uploads and status review.
    """

    def __init__(
        self,
        clients: ConsoleClients,
        uploads: UploadService,
        lifecycle: Optional[StatusLifecycle] = None
    ):
        self.lifecycle = lifecycle or StatusLifecycle.registration()
        super().__init__(clients, HOUSES, self.lifecycle)
        self.uploads = uploads

    async def register(
        self,
        data: Mapping[str, Any],
        photos: Sequence[FileUpload] = ()
    ) -> Tuple[HouseResponse, UploadBatch]:
        """
        Register a house with its photos.

        The form is validated before any upload. Photos are stored one at a
        time; failed files are reported and the registration is submitted
        with the photos that were stored.

        Args:
            data: Registration form fields
            photos: Image files in display order

        Returns:
            Created registration and the upload outcome

        Raises:
            ValidationError: If the form is invalid; nothing is uploaded or sent
            BackendError: If the backend rejects the registration
        """
        form = self.new_form()
        form.open_create({"status": RegistrationStatus.PENDING.value})
        form.update_fields(normalize_form_data(data))
        raise_for_errors(form.validate())

        batch = await self._store_photos(form.draft, photos)
        for photo in batch.uploaded:
            form.add_item("photos", photo.model_dump())

        house = await form.submit()
        logger.info(
            f"Registered house {house.id} with {len(batch.uploaded)} photos, "
            f"{len(batch.failures)} failed"
        )
        return house, batch

    async def update_registration(
        self,
        id: str,
        data: Mapping[str, Any],
        photos: Sequence[FileUpload] = ()
    ) -> Tuple[Optional[HouseResponse], UploadBatch]:
        """
        Edit a registration, appending any newly uploaded photos.

        Raises:
            NotFoundError: If the registration does not exist
            ValidationError: If the form is invalid
            BackendError: If the backend rejects the update
        """
        entity = await self.manager.ensure(id)
        form = self.new_form()
        form.open_edit(entity)
        form.update_fields(normalize_form_data(data))
        raise_for_errors(form.validate())

        batch = await self._store_photos(form.draft, photos)
        for photo in batch.uploaded:
            form.add_item("photos", photo.model_dump())

        house = await form.submit()
        return house, batch

    async def _store_photos(self, draft: Dict[str, Any], photos: Sequence[FileUpload]) -> UploadBatch:
        if not photos:
            return UploadBatch()
        folder = draft.get("address") or draft.get("owner_name") or draft.get("user_id") or "registration"
        return await self.uploads.upload_photos(photos, folder)

    async def change_status(self, id: str, status: str) -> Optional[HouseResponse]:
        """
        Apply a status immediately: one lifecycle check, one update.

        Raises:
            StatusTransitionError: If the lifecycle forbids the change
            BackendError: If the backend rejects the update
        """
        status = parse_status(status)
        house = await self.manager.transition(id, status)
        logger.info(f"House {id} status set to {getattr(status, 'value', status)}")
        return house

    async def stats(self) -> Dict[str, int]:
        """Registration counts per status, plus 'All'."""
        await self.manager.load()
        return self.manager.counts()

    async def detail(self, id: str) -> HouseDetailResponse:
        """
        Registration grouped into the detail view's tabs.

        Raises:
            NotFoundError: If the registration does not exist
        """
        house = await self.manager.ensure(id)
        self.manager.select(id)
        return self.build_detail(house)

    def build_detail(self, house: HouseResponse) -> HouseDetailResponse:
        status = getattr(house.status, "value", house.status)
        return HouseDetailResponse(
            id=house.id,
            overview={
                "propertyType": house.property_type,
                "address": house.address,
                "status": status,
                "bedrooms": house.bedrooms,
                "bathrooms": house.bathrooms,
                "area": house.area,
                "photoCount": len(house.photos),
            },
            details={
                "yearBuilt": house.year_built,
                "description": house.description,
                "amenities": list(house.amenities),
                "lat": house.lat,
                "lng": house.lng,
            },
            photos=list(house.photos),
            owner={
                "userId": house.user_id,
                "name": house.owner_name,
                "phone": house.owner_phone,
                "email": house.owner_email,
            },
            management={
                "status": status,
                "allowedStatuses": self.lifecycle.allowed_from(status),
                "createdAt": house.created_at.isoformat() if house.created_at else None,
                "updatedAt": house.updated_at.isoformat() if house.updated_at else None,
            },
        )
