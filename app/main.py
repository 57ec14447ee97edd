"""
MedLens - FastAPI Application

Health assistant backend: symptom assessment, drug interaction analysis,
medicine identification from package photos, emergency triage,
translation and nearby doctor lookup.

IMPORTANT: This is NOT a diagnostic tool.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.routes import router
from app.api.middleware import (
    RequestLoggingMiddleware,
    ErrorHandlingMiddleware,
    setup_error_handlers,
    setup_rate_limiting
)
from app.utils.logger import get_logger, configure_logging

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Configure logging based on mode
    configure_logging(
        log_level=settings.log_level,
        json_format=not settings.debug
    )

    logger.info(
        "Starting MedLens",
        version=settings.app_version,
        debug=settings.debug,
        text_generation_configured=bool(settings.gemini_api_key),
        places_configured=bool(settings.google_places_api_key)
    )

    yield

    # Shutdown
    logger.info("Shutting down MedLens")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## MedLens - Health Assistant API

Turns free-text answers from AI and translation services into structured,
patient-friendly records.

### ⚠️ Important Disclaimer

**This is NOT a diagnostic tool.** This system:
- Does NOT provide medical diagnoses
- Does NOT replace professional medical advice
- Always recommends consulting healthcare providers

### API Endpoints

| Endpoint | Method | Description |
|----------|--------|-------------|
| `/symptoms/assess` | POST | Possible conditions for symptoms |
| `/emergency/assess` | POST | Checklist triage with narrative |
| `/drugs/analyze` | POST | Drug profile with interactions |
| `/drugs/translate` | POST | Translate a drug profile |
| `/medicine/scan` | POST | Identify medicine from a photo |
| `/medicine/translate` | POST | Translate a medicine profile |
| `/translate` | POST | Translate free text |
| `/languages` | GET | Supported languages |
| `/doctors/nearby` | GET | Doctors near a position |
| `/health` | GET | Health check |
        """,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc" if settings.debug else None,
    )

    # Setup middleware (order matters - last added is outermost)

    # Error handling
    app.add_middleware(ErrorHandlingMiddleware)

    # Request logging
    app.add_middleware(RequestLoggingMiddleware)

    # CORS - Allow all origins for mobile and web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Domain errors and rate limiting
    setup_error_handlers(app)
    setup_rate_limiting(app)

    # Include API routes
    app.include_router(router)

    return app


# Create app instance
app = create_app()


# Run with: uvicorn app.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
