"""
Client for house registrations (housing_route).
"""

from housing_admin.clients.base import ResourceClient
from housing_admin.schemas.house import HouseResponse


class HouseClient(ResourceClient[HouseResponse]):
    model = HouseResponse
    resource_name = "house"
    plural = "houses"
    envelope_keys = ("registrations", "properties")
