"""
Client for property listings (property_listings_route).
"""

from housing_admin.clients.base import ResourceClient
from housing_admin.schemas.listing import ListingResponse


class ListingClient(ResourceClient[ListingResponse]):
    model = ListingResponse
    resource_name = "listing"
    plural = "listings"
    envelope_keys = ("properties", "propertyListings", "propertyListing", "property")
