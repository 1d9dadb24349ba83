"""
Configuration management using Pydantic settings.
Handles backend routes, object storage, upload limits and session storage.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional, List, Dict
from functools import lru_cache


class Settings(BaseSettings):
    """Console settings with environment variable support."""

    # Application configuration
    app_name: str = "Housing Admin Console"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False

    # Housing backend configuration
    backend_url: str = "https://housing-backend-xwrj.onrender.com"
    backend_api_prefix: str = "/api/v1"
    admin_route: str = "admin_route"
    user_route: str = "user_route"
    housing_route: str = "housing_route"
    property_listings_route: str = "property_listings_route"
    reports_route: str = "reports_route"
    http_timeout: float = 30.0

    # Object storage configuration
    storage_url: str = "http://localhost:54321"
    storage_api_key: str = ""
    photo_bucket: str = "property-photos"
    report_bucket: str = "reports"

    # File upload configuration
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    allowed_photo_types: List[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]
    allowed_document_types: List[str] = [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ]

    # Session token storage; None keeps tokens in memory
    session_file: Optional[str] = None

    # Registration status lifecycle; None allows any status to reach any other
    registration_status_transitions: Optional[Dict[str, List[str]]] = None

    # API configuration
    api_v1_prefix: str = "/api/v1"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    max_request_size: int = 25 * 1024 * 1024

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("backend_url", "storage_url")
    @classmethod
    def validate_base_url(cls, v):
        """Require an absolute http(s) URL and drop trailing slashes."""
        if not v or not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing" or self.testing

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def route_url(self, route: str) -> str:
        """Build the absolute base URL of one backend resource route."""
        return f"{self.backend_url}{self.backend_api_prefix}/{route}"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
