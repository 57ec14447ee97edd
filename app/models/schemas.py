"""
Pydantic schemas for MedLens.

Defines the structured records produced from free-text service answers
and the request/response models for all API endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, List

from pydantic import BaseModel, Field, ConfigDict


# =============================================================================
# Sentinels
# =============================================================================

NOT_SPECIFIED = "Not specified"
NO_DESCRIPTION = "No description available"
UNKNOWN_MEDICINE = "Unknown Medicine"
DEFAULT_CONDITION_DESCRIPTION = "Based on AI analysis"


# =============================================================================
# Enums
# =============================================================================

class SeverityLevel(str, Enum):
    """Closed severity scale for conditions and drug interactions."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TriageLevel(str, Enum):
    """Urgency derived from the emergency checklist."""
    IMMEDIATE = "immediate"
    URGENT = "urgent"
    MONITOR = "monitor"


# =============================================================================
# Safety
# =============================================================================

class SafetyDisclaimer(BaseModel):
    """Safety disclaimer attached to every analysis."""

    main_disclaimer: str = Field(
        default=(
            "This information is for general knowledge and does not constitute "
            "medical advice."
        ),
        description="Primary disclaimer text"
    )
    consultation_reminder: str = Field(
        default=(
            "Always consult a healthcare professional before starting, stopping, "
            "or altering any treatment, including medication."
        ),
        description="Doctor consultation reminder"
    )


# =============================================================================
# Parsed Records
# =============================================================================

class InteractionRecord(BaseModel):
    """One drug interaction warning."""

    substance: str = Field(default=NOT_SPECIFIED, description="Interacting drug or substance")
    severity: SeverityLevel = Field(default=SeverityLevel.MEDIUM)
    description: str = Field(default=NOT_SPECIFIED)
    recommendation: str = Field(default=NOT_SPECIFIED)

    def is_placeholder(self) -> bool:
        """True when no sub-field could be read from the source block."""
        return (
            self.substance == NOT_SPECIFIED
            and self.description == NOT_SPECIFIED
            and self.recommendation == NOT_SPECIFIED
            and self.severity == SeverityLevel.MEDIUM
        )


class Condition(BaseModel):
    """A possible condition suggested for a set of symptoms."""

    name: str
    severity: SeverityLevel = SeverityLevel.MEDIUM
    description: str = DEFAULT_CONDITION_DESCRIPTION
    recommendations: List[str] = Field(default_factory=list)


class SymptomAssessment(BaseModel):
    """Structured answer to a symptom assessment."""

    status: Literal["ok"] = "ok"
    conditions: List[Condition] = Field(default_factory=list)
    severity: SeverityLevel = SeverityLevel.MEDIUM
    recommendations: List[str] = Field(
        default_factory=list,
        description="Recommended actions followed by urgent-care advice"
    )
    disclaimer: SafetyDisclaimer = Field(default_factory=SafetyDisclaimer)


class DrugProfile(BaseModel):
    """Structured drug information with interaction warnings."""

    status: Literal["ok"] = "ok"
    name: str
    description: str = NO_DESCRIPTION
    ingredients: List[str] = Field(default_factory=list)
    uses: List[str] = Field(default_factory=list)
    side_effects: List[str] = Field(default_factory=list)
    precautions: List[str] = Field(default_factory=list)
    interactions: List[InteractionRecord] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    disclaimer: SafetyDisclaimer = Field(default_factory=SafetyDisclaimer)


class MedicineProfile(BaseModel):
    """Structured details for a medicine identified from its packaging."""

    status: Literal["ok"] = "ok"
    name: str = UNKNOWN_MEDICINE
    ingredients: List[str] = Field(default_factory=list)
    uses: List[str] = Field(default_factory=list)
    dosage: List[str] = Field(default_factory=list)
    side_effects: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    disclaimer: SafetyDisclaimer = Field(default_factory=SafetyDisclaimer)


class EmptyResult(BaseModel):
    """
    The service answered but nothing usable could be extracted.

    Distinct from an upstream failure, which is reported as an error.
    """

    status: Literal["no_result"] = "no_result"
    use_case: str
    message: str = Field(
        default=(
            "No usable information could be extracted. Please provide more "
            "details or consult a doctor."
        )
    )


# =============================================================================
# Emergency
# =============================================================================

class EmergencyChecklist(BaseModel):
    """Red-flag checklist filled in by the user."""

    breathing: bool = Field(default=False, description="Difficulty breathing")
    conscious: bool = Field(default=False, description="Loss of consciousness")
    bleeding: bool = Field(default=False, description="Severe bleeding")
    pain: bool = Field(default=False, description="Severe pain")
    other: bool = Field(default=False)
    other_description: Optional[str] = Field(default=None)


class TriageResult(BaseModel):
    """Urgency recommendation derived from the checklist alone."""

    level: TriageLevel
    text: str
    flags_set: int = Field(ge=0)
    emergency_number: str


class EmergencyAssessment(BaseModel):
    """Checklist triage plus the model's narrative and parsed sections."""

    triage: TriageResult
    analysis: str = Field(description="Narrative answer with markdown removed")
    assessment: Optional[SymptomAssessment] = None
    disclaimer: SafetyDisclaimer = Field(default_factory=SafetyDisclaimer)


# =============================================================================
# Places
# =============================================================================

class DoctorPlace(BaseModel):
    """A nearby doctor or clinic."""

    id: str
    name: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[float] = None
    available: bool = False
    type: str = "hospital"
    emergency_service: bool = False

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Requests
# =============================================================================

class SymptomInput(BaseModel):
    """Request to assess a set of symptoms."""

    symptoms: List[str] = Field(min_length=1, description="Selected symptoms")
    duration: str = Field(default="", description="How long symptoms have lasted")
    severity: str = Field(default="", description="Self-reported severity (Mild/Moderate/Severe)")
    additional_notes: str = Field(default="")


class EmergencyInput(BaseModel):
    """Request for a quick emergency assessment."""

    symptoms: str = Field(min_length=1)
    situation: str = Field(min_length=1)
    checklist: EmergencyChecklist = Field(default_factory=EmergencyChecklist)


class DrugAnalysisRequest(BaseModel):
    """Request to analyze one or more drugs."""

    drugs: List[str] = Field(min_length=1, description="Drug names, e.g. Ibuprofen")


class TranslateRequest(BaseModel):
    """Request to translate free text."""

    text: str
    target_language: str = Field(description="ISO 639-1 language code")


class TranslateResponse(BaseModel):
    """Translated text."""

    translated_text: str
    target_language: str
    chunks: int = Field(ge=0, description="Number of pieces sent to the translation API")


class DrugTranslateRequest(BaseModel):
    """Request to translate a drug profile."""

    profile: DrugProfile
    target_language: str


class MedicineTranslateRequest(BaseModel):
    """Request to translate a medicine profile."""

    profile: MedicineProfile
    target_language: str


class LanguageInfo(BaseModel):
    """A supported translation language."""

    code: str
    name: str


# =============================================================================
# Health & Errors
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(description="Application version")
    text_generation_configured: bool = Field(default=False)
    text_generation_model: Optional[str] = Field(default=None)
    places_configured: bool = Field(default=False)
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(description="Error type")
    message: str = Field(description="Human-readable error message")
    error_code: str = Field(description="Machine-readable error code")
    service: Optional[str] = Field(default=None, description="Upstream service that failed")
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(from_attributes=True)
