"""
Emergency triage for MedLens.

Derives an urgency recommendation from the red-flag checklist and builds
the situation description sent for analysis.
"""

from app.models.schemas import EmergencyChecklist, TriageLevel, TriageResult
from app.utils.logger import get_logger

logger = get_logger("triage")

# Checklist flags that count towards urgency; "other" is free text only
RED_FLAGS = {
    "breathing": "Difficulty breathing",
    "conscious": "Loss of consciousness",
    "bleeding": "Severe bleeding",
    "pain": "Severe pain",
}

IMMEDIATE_THRESHOLD = 3
URGENT_THRESHOLD = 1

TRIAGE_TEXT = {
    TriageLevel.IMMEDIATE: "Immediate Emergency Care Needed",
    TriageLevel.URGENT: "Urgent Medical Attention Recommended",
    TriageLevel.MONITOR: "Monitor Symptoms",
}


class TriageService:
    """
    Checklist-based urgency assessment.

    Three or more red flags call for immediate care, one or two for urgent
    attention, none for monitoring. The result never depends on the
    model's answer.
    """

    def __init__(self, emergency_number: str = "112"):
        self.emergency_number = emergency_number

    def assess_checklist(self, checklist: EmergencyChecklist) -> TriageResult:
        """
        Derive the triage level from the checklist.

        Args:
            checklist: Red-flag answers

        Returns:
            TriageResult with level, display text and emergency number
        """
        flags_set = sum(1 for name in RED_FLAGS if getattr(checklist, name))

        if flags_set >= IMMEDIATE_THRESHOLD:
            level = TriageLevel.IMMEDIATE
        elif flags_set >= URGENT_THRESHOLD:
            level = TriageLevel.URGENT
        else:
            level = TriageLevel.MONITOR

        logger.info("Checklist triage", level=level.value, flags_set=flags_set)

        return TriageResult(
            level=level,
            text=TRIAGE_TEXT[level],
            flags_set=flags_set,
            emergency_number=self.emergency_number
        )

    def describe_situation(
        self,
        symptoms: str,
        situation: str,
        checklist: EmergencyChecklist
    ) -> str:
        """Build the situation text sent to the text generation call."""
        lines = [
            f"Symptoms: {symptoms}",
            "",
            f"Emergency Situation: {situation}",
            "",
            "Emergency Checklist:",
        ]
        for name, label in RED_FLAGS.items():
            lines.append(f"- {label}: {'Yes' if getattr(checklist, name) else 'No'}")
        if checklist.other and checklist.other_description:
            lines.append(f"- Other: {checklist.other_description}")
        return "\n".join(lines)
