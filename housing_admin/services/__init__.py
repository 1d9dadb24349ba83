"""
Service layer for console behaviour.
Contains the resource manager, form controller, status lifecycle, uploads,
per-page services and error handling.
"""

from .status import StatusLifecycle
from .resource_manager import ResourceManager, PendingMutation
from .form import FormController
from .resources import ResourceDefinition, RESOURCES, get_resource
from .base import ResourceService
from .uploads import UploadService, UploadBatch, UploadFailure
from .registration import RegistrationService
from .listings import ListingService
from .reports import ReportService
from .accounts import AccountService
from .error_handler import ErrorHandlerService

__all__ = [
    "StatusLifecycle",
    "ResourceManager",
    "PendingMutation",
    "FormController",
    "ResourceDefinition",
    "RESOURCES",
    "get_resource",
    "ResourceService",
    "UploadService",
    "UploadBatch",
    "UploadFailure",
    "RegistrationService",
    "ListingService",
    "ReportService",
    "AccountService",
    "ErrorHandlerService"
]
