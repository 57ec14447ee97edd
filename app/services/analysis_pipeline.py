"""
Analysis pipeline for MedLens.

Turns raw text-generation answers into the records the client renders.
Each use case extracts sections once with its own marker table, routes
each section through the list normalizer or the interaction parser, and
assembles the aggregate. When nothing at all could be extracted the
result is an EmptyResult, which is not an error.
"""

import re
import time
from typing import List, Optional, Sequence, Union

from app.core.image_processor import ImageProcessor
from app.core.interaction_parser import interaction_parser, normalize_severity
from app.core.list_normalizer import clean_paragraph, list_normalizer, name_normalizer
from app.core.llm_engine import LLMEngine
from app.core.prompts import (
    DRUG_MARKERS,
    MEDICINE_MARKERS,
    MEDICINE_NAME_PROMPT,
    SYMPTOM_MARKERS,
    build_drug_prompt,
    build_emergency_prompt,
    build_medicine_details_prompt,
    build_symptom_prompt,
)
from app.core.section_extractor import MarkerTable, SectionExtractor
from app.models.schemas import (
    DEFAULT_CONDITION_DESCRIPTION,
    NO_DESCRIPTION,
    UNKNOWN_MEDICINE,
    Condition,
    DrugProfile,
    EmergencyAssessment,
    EmergencyInput,
    EmptyResult,
    MedicineProfile,
    SeverityLevel,
    SymptomAssessment,
    SymptomInput,
)
from app.services.triage import TriageService
from app.utils.logger import get_logger

logger = get_logger("analysis_pipeline")

SymptomResult = Union[SymptomAssessment, EmptyResult]
DrugResult = Union[DrugProfile, EmptyResult]
MedicineResult = Union[MedicineProfile, EmptyResult]


# =============================================================================
# Parsing (pure)
# =============================================================================

def parse_symptom_assessment(
    raw: Optional[str],
    markers: MarkerTable = SYMPTOM_MARKERS
) -> SymptomResult:
    """
    Parse a symptom assessment answer.

    Every condition carries the overall severity and the combined list of
    recommended actions followed by urgent-care advice.
    """
    sections = SectionExtractor(markers).extract_sections(raw)

    severity = normalize_severity(sections.text_for("severity"))
    recommendations = (
        list_normalizer.normalize(sections.text_for("recommendations"))
        + list_normalizer.normalize(sections.text_for("urgent"))
    )
    conditions = [
        _to_condition(item, severity, recommendations)
        for item in name_normalizer.normalize(sections.text_for("conditions"))
    ]

    if not conditions and not recommendations:
        return EmptyResult(use_case="symptom_assessment")

    return SymptomAssessment(
        conditions=conditions,
        severity=severity,
        recommendations=recommendations
    )


def _to_condition(item: str, severity: SeverityLevel, recommendations: List[str]) -> Condition:
    """Split "Name: description" items; plain items get the default description."""
    name, description = item, DEFAULT_CONDITION_DESCRIPTION
    if ":" in item:
        head, tail = (part.strip() for part in item.split(":", 1))
        if head:
            name = head
            description = list_normalizer.clean_item(tail) or DEFAULT_CONDITION_DESCRIPTION

    return Condition(
        name=name,
        severity=severity,
        description=description,
        recommendations=list(recommendations)
    )


def parse_drug_profile(
    raw: Optional[str],
    drug_name: str,
    markers: MarkerTable = DRUG_MARKERS
) -> DrugResult:
    """Parse a drug analysis answer into a DrugProfile."""
    sections = SectionExtractor(markers).extract_sections(raw)

    profile = DrugProfile(
        name=name_normalizer.clean_item(drug_name) or drug_name,
        description=clean_paragraph(sections.text_for("overview")) or NO_DESCRIPTION,
        ingredients=list_normalizer.normalize(sections.text_for("ingredients")),
        uses=list_normalizer.normalize(sections.text_for("uses")),
        side_effects=list_normalizer.normalize(sections.text_for("side_effects")),
        precautions=list_normalizer.normalize(sections.text_for("precautions")),
        interactions=interaction_parser.parse(sections.text_for("interactions")),
        recommendations=list_normalizer.normalize(sections.text_for("recommendations")),
    )

    lists = (
        profile.ingredients, profile.uses, profile.side_effects,
        profile.precautions, profile.interactions, profile.recommendations
    )
    if profile.description == NO_DESCRIPTION and not any(lists):
        return EmptyResult(use_case="drug_analysis")
    return profile


def parse_medicine_profile(
    raw: Optional[str],
    medicine_name: Optional[str],
    markers: MarkerTable = MEDICINE_MARKERS
) -> MedicineResult:
    """Parse a medicine details answer into a MedicineProfile."""
    sections = SectionExtractor(markers).extract_sections(raw)

    profile = MedicineProfile(
        name=name_normalizer.clean_item(medicine_name or "") or UNKNOWN_MEDICINE,
        ingredients=list_normalizer.normalize(sections.text_for("ingredients")),
        uses=list_normalizer.normalize(sections.text_for("uses")),
        dosage=list_normalizer.normalize(sections.text_for("dosage")),
        side_effects=list_normalizer.normalize(sections.text_for("side_effects")),
        warnings=list_normalizer.normalize(sections.text_for("warnings")),
    )

    lists = (profile.ingredients, profile.uses, profile.dosage, profile.side_effects, profile.warnings)
    if not any(lists):
        return EmptyResult(use_case="medicine_scan")
    return profile


def clean_narrative(raw: str) -> str:
    """Remove bold markers and star bullets from a free-text answer."""
    text = raw.replace("**", "")
    return re.sub(r"^\*\s*", "", text, flags=re.MULTILINE).strip()


# =============================================================================
# Orchestration
# =============================================================================

class AnalysisPipeline:
    """
    Runs each use case end to end.

    The text generation call is awaited first; parsing only ever runs on
    resolved text. Upstream failures propagate as ServiceUnavailableError.
    """

    def __init__(
        self,
        llm_engine: LLMEngine,
        image_processor: Optional[ImageProcessor] = None,
        triage: Optional[TriageService] = None
    ):
        self.llm_engine = llm_engine
        self.image_processor = image_processor or ImageProcessor()
        self.triage = triage or TriageService()

    async def assess_symptoms(self, request: SymptomInput) -> SymptomResult:
        """
        Assess a set of symptoms.

        Args:
            request: Selected symptoms and details

        Returns:
            SymptomAssessment, or EmptyResult when no conditions were found
        """
        start_time = time.time()
        prompt = build_symptom_prompt(
            request.symptoms,
            duration=request.duration,
            severity=request.severity,
            additional_notes=request.additional_notes
        )

        raw = await self.llm_engine.generate(prompt)
        result = parse_symptom_assessment(raw)

        logger.info(
            "Symptom assessment complete",
            symptoms=len(request.symptoms),
            status=result.status,
            conditions=len(result.conditions) if isinstance(result, SymptomAssessment) else 0,
            processing_time_ms=int((time.time() - start_time) * 1000)
        )
        return result

    async def analyze_drugs(self, drugs: Sequence[str]) -> DrugResult:
        """
        Analyze one or more drugs.

        Args:
            drugs: Drug names; the first names the resulting profile

        Raises:
            ValueError: If no non-blank drug name is given
        """
        names = [drug.strip() for drug in drugs if drug and drug.strip()]
        if not names:
            raise ValueError("Invalid input: drugs must be a non-empty list")

        start_time = time.time()
        raw = await self.llm_engine.generate(build_drug_prompt(names))
        result = parse_drug_profile(raw, names[0])

        logger.info(
            "Drug analysis complete",
            drug=names[0],
            status=result.status,
            interactions=len(result.interactions) if isinstance(result, DrugProfile) else 0,
            processing_time_ms=int((time.time() - start_time) * 1000)
        )
        return result

    async def scan_medicine(self, image: bytes) -> MedicineResult:
        """
        Identify a medicine from a package photo and describe it.

        Two sequential calls: name extraction with the image, then details
        for that name without it.

        Raises:
            ValueError: If the image is unusable or too large
        """
        start_time = time.time()
        prepared = self.image_processor.prepare_for_analysis(image)

        medicine_name = (await self.llm_engine.generate(
            MEDICINE_NAME_PROMPT,
            image=prepared.data,
            mime_type=prepared.mime_type
        )).strip()
        logger.info("Extracted medicine name", medicine=medicine_name)

        raw = await self.llm_engine.generate(build_medicine_details_prompt(medicine_name))
        result = parse_medicine_profile(raw, medicine_name)

        logger.info(
            "Medicine scan complete",
            medicine=medicine_name,
            status=result.status,
            processing_time_ms=int((time.time() - start_time) * 1000)
        )
        return result

    async def assess_emergency(self, request: EmergencyInput) -> EmergencyAssessment:
        """
        Quick emergency assessment.

        Triage comes from the checklist alone; the model's answer is
        returned as cleaned narrative plus parsed sections when it has any.
        """
        triage = self.triage.assess_checklist(request.checklist)
        description = self.triage.describe_situation(
            request.symptoms, request.situation, request.checklist
        )

        raw = await self.llm_engine.generate(build_emergency_prompt(description))
        parsed = parse_symptom_assessment(raw)

        logger.info(
            "Emergency assessment complete",
            triage=triage.level.value,
            parsed=parsed.status
        )
        return EmergencyAssessment(
            triage=triage,
            analysis=clean_narrative(raw),
            assessment=parsed if isinstance(parsed, SymptomAssessment) else None
        )
