"""
Client for uploaded reports (reports_route).
"""

from housing_admin.clients.base import ResourceClient
from housing_admin.schemas.report import ReportResponse


class ReportClient(ResourceClient[ReportResponse]):
    model = ReportResponse
    resource_name = "report"
    plural = "reports"
