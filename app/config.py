"""
Configuration management for MedLens.

Uses Pydantic Settings for type-safe environment variable handling.
All configuration is loaded from environment variables or .env file.

Only the HTTP layer reads these settings. Parsers, the analysis pipeline
and the API clients receive their values as constructor arguments.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "MedLens"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # Server
    # ==========================================================================
    host: str = "0.0.0.0"
    port: int = 8000

    # ==========================================================================
    # Text Generation (Gemini)
    # ==========================================================================
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"

    # ==========================================================================
    # Places Lookup
    # ==========================================================================
    google_places_api_key: str = ""
    places_base_url: str = "https://maps.googleapis.com/maps/api/place"
    places_type: str = "doctor"
    places_language: str = "en"
    places_region: str = "in"
    places_rank_by: str = "distance"
    places_fields: str = (
        "name,formatted_address,formatted_phone_number,rating,"
        "opening_hours,geometry,place_id"
    )

    # ==========================================================================
    # Translation
    # ==========================================================================
    translation_api_url: str = "https://api.mymemory.translated.net/get"
    translation_source_language: str = "en"
    translation_chunk_size: int = 500

    # ==========================================================================
    # HTTP Clients
    # ==========================================================================
    http_timeout_seconds: float = 15.0

    # ==========================================================================
    # Rate Limiting
    # ==========================================================================
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 30

    # ==========================================================================
    # Image Upload
    # ==========================================================================
    max_upload_size_mb: int = 10
    allowed_image_extensions: str = ".png,.jpg,.jpeg,.webp"
    max_image_payload_bytes: int = 4 * 1024 * 1024
    image_target_width: int = 800
    image_jpeg_quality: int = 80

    # ==========================================================================
    # Emergency
    # ==========================================================================
    emergency_number: str = "112"

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def max_upload_size_bytes(self) -> int:
        """Maximum upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def image_extensions(self) -> List[str]:
        """List of allowed image extensions."""
        return [ext.strip() for ext in self.allowed_image_extensions.split(",")]

    @property
    def places_field_list(self) -> List[str]:
        """Place detail fields requested from the places API."""
        return [field.strip() for field in self.places_fields.split(",") if field.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience access
settings = get_settings()
