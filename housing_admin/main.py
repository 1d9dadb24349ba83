"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from pydantic import ValidationError as PydanticValidationError
import httpx
import logging

from housing_admin.config import settings
from housing_admin.routers import (
    auth_router,
    users_router,
    admins_router,
    houses_router,
    listings_router,
    reports_router
)
from housing_admin.utils.exceptions import APIException, BackendError
from housing_admin.utils.session import FileTokenStore, TokenStore
from housing_admin.services.error_handler import ErrorHandlerService
from housing_admin.middleware.request_logging import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_token_store() -> TokenStore:
    """File-backed token store when `session_file` is set, in-memory otherwise."""
    if settings.session_file:
        return FileTokenStore(settings.session_file)
    return TokenStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Opens the shared outbound HTTP client and the token store.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Housing backend: {settings.backend_url}")

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    app.state.token_store = create_token_store()

    yield

    # Shutdown
    logger.info("Shutting down application")
    await app.state.http_client.aclose()


# Create FastAPI application instance
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Administrative console for the housing-registration platform.

    ## Features

    * **Users and Admins**: Search, create, edit and delete accounts
    * **House Registrations**: Review registrations, change status, upload photos
    * **Property Listings**: Publish and maintain listings with cover images
    * **Reports**: Upload PDF, Word and Excel reports and filter them by type

    ## Authentication

    Log in with `/api/v1/auth/login`; the backend token is kept by the console and
    sent with every backend call. A `Bearer` header on a request overrides it.

    ## Deletes

    Every delete requires `confirm=true`; without it the console answers 428.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Admin login, logout, signup and session"},
        {"name": "Users", "description": "User account management"},
        {"name": "Admins", "description": "Admin accounts and the current admin profile"},
        {"name": "House Registrations", "description": "Registration review and status management"},
        {"name": "Property Listings", "description": "Listing management"},
        {"name": "Reports", "description": "Report document upload and management"},
        {"name": "Health", "description": "Service health endpoints"}
    ],
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

# Add request logging middleware
app.add_middleware(
    RequestLoggingMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing
)

# Include API routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(users_router, prefix=settings.api_v1_prefix)
app.include_router(admins_router, prefix=settings.api_v1_prefix)
app.include_router(houses_router, prefix=settings.api_v1_prefix)
app.include_router(listings_router, prefix=settings.api_v1_prefix)
app.include_router(reports_router, prefix=settings.api_v1_prefix)


# Global exception handlers using ErrorHandlerService
@app.exception_handler(BackendError)
async def backend_exception_handler(request: Request, exc: BackendError):
    """Pass backend failures through with the backend's status and body."""
    return ErrorHandlerService.handle_backend_error(exc, request)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with structured error responses."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc.errors(), request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    """Handle Pydantic validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc.errors(), request)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions with structured error responses."""
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint providing basic console information.
    """
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint with a backend reachability probe.
    Any HTTP answer from the backend counts as reachable.
    """
    http_client: httpx.AsyncClient = request.app.state.http_client
    try:
        await http_client.get(settings.backend_url, timeout=5.0)
    except httpx.RequestError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Housing backend unreachable: {e.__class__.__name__}"
        )

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "backend": "reachable"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "housing_admin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
