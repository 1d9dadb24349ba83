"""
Property listing service: listing CRUD with an optional cover image.
"""

import logging
from typing import Any, Mapping, Optional

from housing_admin.clients import ConsoleClients
from housing_admin.schemas.listing import ListingResponse
from housing_admin.services.base import ResourceService, normalize_form_data
from housing_admin.services.resources import LISTINGS
from housing_admin.services.uploads import UploadService
from housing_admin.utils.file_utils import FileUpload
from housing_admin.utils.validators import raise_for_errors

logger = logging.getLogger(__name__)


class ListingService(ResourceService):
    """Listings page operations."""

    def __init__(self, clients: ConsoleClients, uploads: UploadService):
        super().__init__(clients, LISTINGS)
        self.uploads = uploads

    async def publish(self, data: Mapping[str, Any], image: Optional[FileUpload] = None) -> ListingResponse:
        """
        Create a listing, storing its cover image first when one is given.

        Raises:
            ValidationError: If the form is invalid; nothing is uploaded or sent
            FileUploadError: If the image is rejected
            BackendError: If storage or the backend fails
        """
        form = self.new_form()
        form.open_create()
        form.update_fields(normalize_form_data(data))
        raise_for_errors(form.validate())

        if image is not None:
            photo = await self.uploads.upload_photo(image, form.draft.get("title") or "listing", prefix="listing")
            form.set_field("image", photo.url)

        listing = await form.submit()
        logger.info(f"Published listing {listing.id}: {listing.title}")
        return listing

    async def revise(
        self,
        id: str,
        data: Mapping[str, Any],
        image: Optional[FileUpload] = None
    ) -> Optional[ListingResponse]:
        """
        Edit a listing, replacing the cover image when a new one is given.

        Raises:
            NotFoundError: If the listing does not exist
            ValidationError: If the form is invalid
            BackendError: If storage or the backend fails
        """
        entity = await self.manager.ensure(id)
        form = self.new_form()
        form.open_edit(entity)
        form.update_fields(normalize_form_data(data))
        raise_for_errors(form.validate())

        if image is not None:
            photo = await self.uploads.upload_photo(image, form.draft.get("title") or "listing", prefix="listing")
            form.set_field("image", photo.url)

        return await form.submit()
