"""
API routes for MedLens.

Defines the REST API endpoints for symptom assessment, drug analysis,
medicine scanning, emergency triage, translation and doctor lookup.
"""

from functools import lru_cache
from typing import List, Union

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from app.api.middleware import limiter
from app.config import settings
from app.core.image_processor import ImageProcessor
from app.core.llm_engine import LLMEngine
from app.core.places_client import PlacesClient
from app.core.translator import SUPPORTED_LANGUAGES, Translator, chunk_text, validate_language
from app.models.schemas import (
    DoctorPlace,
    DrugAnalysisRequest,
    DrugProfile,
    DrugTranslateRequest,
    EmergencyAssessment,
    EmergencyInput,
    EmptyResult,
    ErrorResponse,
    HealthResponse,
    LanguageInfo,
    MedicineProfile,
    MedicineTranslateRequest,
    SymptomAssessment,
    SymptomInput,
    TranslateRequest,
    TranslateResponse,
)
from app.services.analysis_pipeline import AnalysisPipeline
from app.services.triage import TriageService
from app.utils.file_validators import FileValidator
from app.utils.logger import get_logger

logger = get_logger("routes")

# Create router
router = APIRouter()

RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    503: {"model": ErrorResponse, "description": "Upstream service unavailable"},
}


# =============================================================================
# Dependencies
# =============================================================================

@lru_cache
def get_llm_engine() -> LLMEngine:
    return LLMEngine(api_key=settings.gemini_api_key, model=settings.gemini_model)


def get_pipeline(llm_engine: LLMEngine = Depends(get_llm_engine)) -> AnalysisPipeline:
    """Analysis pipeline wired from settings."""
    return AnalysisPipeline(
        llm_engine,
        image_processor=ImageProcessor(
            target_width=settings.image_target_width,
            jpeg_quality=settings.image_jpeg_quality,
            max_payload_bytes=settings.max_image_payload_bytes
        ),
        triage=TriageService(emergency_number=settings.emergency_number)
    )


def get_translator() -> Translator:
    return Translator(
        api_url=settings.translation_api_url,
        source_language=settings.translation_source_language,
        chunk_size=settings.translation_chunk_size,
        timeout=settings.http_timeout_seconds
    )


def get_places_client() -> PlacesClient:
    return PlacesClient(
        api_key=settings.google_places_api_key,
        base_url=settings.places_base_url,
        place_type=settings.places_type,
        language=settings.places_language,
        region=settings.places_region,
        rank_by=settings.places_rank_by,
        fields=settings.places_field_list,
        timeout=settings.http_timeout_seconds
    )


def get_file_validator() -> FileValidator:
    return FileValidator(
        max_file_size=settings.max_upload_size_bytes,
        image_extensions=settings.image_extensions
    )


# =============================================================================
# System
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check endpoint"
)
async def health_check(
    llm_engine: LLMEngine = Depends(get_llm_engine),
    places: PlacesClient = Depends(get_places_client)
):
    """
    Check if the service is healthy and running.

    Reports whether the text generation and places services have
    credentials configured.
    """
    engine_status = llm_engine.get_status()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        text_generation_configured=engine_status["configured"],
        text_generation_model=engine_status["model"],
        places_configured=places.is_configured
    )


@router.get(
    "/languages",
    response_model=List[LanguageInfo],
    tags=["System"],
    summary="List supported translation languages"
)
async def list_languages():
    return [LanguageInfo(code=code, name=name) for code, name in SUPPORTED_LANGUAGES.items()]


# =============================================================================
# Symptoms & Emergency
# =============================================================================

@router.post(
    "/symptoms/assess",
    response_model=Union[SymptomAssessment, EmptyResult],
    tags=["Analysis"],
    summary="Assess a set of symptoms",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def assess_symptoms(
    request: Request,
    body: SymptomInput,
    pipeline: AnalysisPipeline = Depends(get_pipeline)
):
    """
    Suggest possible conditions for the selected symptoms.

    **Important**: This is NOT a diagnosis. Results are informational
    and every answer carries a safety disclaimer.

    Returns a SymptomAssessment, or a `no_result` record when the answer
    held no recognisable conditions or recommendations.
    """
    return await pipeline.assess_symptoms(body)


@router.post(
    "/emergency/assess",
    response_model=EmergencyAssessment,
    tags=["Analysis"],
    summary="Quick emergency assessment",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def assess_emergency(
    request: Request,
    body: EmergencyInput,
    pipeline: AnalysisPipeline = Depends(get_pipeline)
):
    """
    Triage an emergency situation.

    The urgency level comes from the red-flag checklist alone; the
    model's narrative is attached for context.
    """
    return await pipeline.assess_emergency(body)


# =============================================================================
# Drugs
# =============================================================================

@router.post(
    "/drugs/analyze",
    response_model=Union[DrugProfile, EmptyResult],
    tags=["Analysis"],
    summary="Analyze drugs and their interactions",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def analyze_drugs(
    request: Request,
    body: DrugAnalysisRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline)
):
    """
    Describe one or more drugs.

    Returns uses, side effects, precautions, recommendations and
    interaction warnings with a High/Medium/Low severity.
    """
    return await pipeline.analyze_drugs(body.drugs)


@router.post(
    "/drugs/translate",
    response_model=DrugProfile,
    tags=["Translation"],
    summary="Translate a drug profile",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def translate_drug_profile(
    request: Request,
    body: DrugTranslateRequest,
    translator: Translator = Depends(get_translator)
):
    target = validate_language(body.target_language)
    return await translator.translate_drug_profile(body.profile, target)


# =============================================================================
# Medicine Scan
# =============================================================================

@router.post(
    "/medicine/scan",
    response_model=Union[MedicineProfile, EmptyResult],
    tags=["Analysis"],
    summary="Identify a medicine from a package photo",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def scan_medicine(
    request: Request,
    file: UploadFile = File(..., description="Photo of the medicine packaging"),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
    validator: FileValidator = Depends(get_file_validator)
):
    """
    Identify a medicine from a photo of its packaging.

    Supports:
    - PNG files (.png)
    - JPEG files (.jpg, .jpeg)
    - WebP files (.webp)

    The name is read from the image first, then details are looked up
    for that name.
    """
    content = await file.read()
    mime_type = validator.validate_image(content, file.filename)

    logger.info(
        "Medicine photo uploaded",
        filename=file.filename,
        mime_type=mime_type,
        size_bytes=len(content)
    )
    return await pipeline.scan_medicine(content)


@router.post(
    "/medicine/translate",
    response_model=MedicineProfile,
    tags=["Translation"],
    summary="Translate a medicine profile",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def translate_medicine_profile(
    request: Request,
    body: MedicineTranslateRequest,
    translator: Translator = Depends(get_translator)
):
    target = validate_language(body.target_language)
    return await translator.translate_medicine_profile(body.profile, target)


# =============================================================================
# Translation
# =============================================================================

@router.post(
    "/translate",
    response_model=TranslateResponse,
    tags=["Translation"],
    summary="Translate free text",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def translate_text(
    request: Request,
    body: TranslateRequest,
    translator: Translator = Depends(get_translator)
):
    """
    Translate text of any length.

    Long text is split into sentence-aligned chunks which are translated
    concurrently and joined back in order.
    """
    target = validate_language(body.target_language)
    chunks = (
        len(chunk_text(body.text, translator.chunk_size))
        if translator.needs_translation(body.text, target) else 0
    )

    translated = await translator.translate_text(body.text, target)

    return TranslateResponse(
        translated_text=translated,
        target_language=target,
        chunks=chunks
    )


# =============================================================================
# Doctors
# =============================================================================

@router.get(
    "/doctors/nearby",
    response_model=List[DoctorPlace],
    tags=["Doctors"],
    summary="Find doctors near a position",
    responses=ERROR_RESPONSES
)
@limiter.limit(RATE_LIMIT)
async def find_nearby_doctors(
    request: Request,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    places: PlacesClient = Depends(get_places_client)
):
    """
    Find doctors and clinics near the given position, nearest first.

    Returns an empty list when nothing is found nearby.
    """
    return await places.find_nearby_doctors(latitude, longitude)
