"""
Tests for checklist triage.
"""

import pytest

from app.models.schemas import EmergencyChecklist, TriageLevel
from app.services.triage import TriageService


@pytest.fixture
def triage():
    return TriageService(emergency_number="911")


class TestAssessChecklist:
    """Test urgency levels from red flags."""

    def test_no_flags_monitor(self, triage):
        result = triage.assess_checklist(EmergencyChecklist())

        assert result.level == TriageLevel.MONITOR
        assert result.flags_set == 0
        assert result.emergency_number == "911"

    @pytest.mark.parametrize("flags", [
        {"breathing": True},
        {"bleeding": True, "pain": True},
    ])
    def test_one_or_two_flags_urgent(self, triage, flags):
        result = triage.assess_checklist(EmergencyChecklist(**flags))
        assert result.level == TriageLevel.URGENT

    def test_three_flags_immediate(self, triage):
        checklist = EmergencyChecklist(breathing=True, conscious=True, bleeding=True)
        result = triage.assess_checklist(checklist)

        assert result.level == TriageLevel.IMMEDIATE
        assert result.text == "Immediate Emergency Care Needed"

    def test_other_does_not_count(self, triage):
        """The free-text "other" entry never raises the level."""
        checklist = EmergencyChecklist(other=True, other_description="Dizziness")
        assert triage.assess_checklist(checklist).level == TriageLevel.MONITOR


class TestDescribeSituation:
    def test_lists_every_flag(self, triage):
        text = triage.describe_situation(
            "Chest pain",
            "Collapsed at work",
            EmergencyChecklist(breathing=True, other=True, other_description="Sweating")
        )

        assert text.startswith("Symptoms: Chest pain")
        assert "Emergency Situation: Collapsed at work" in text
        assert "- Difficulty breathing: Yes" in text
        assert "- Loss of consciousness: No" in text
        assert "- Other: Sweating" in text

    def test_other_omitted_without_description(self, triage):
        text = triage.describe_situation("a", "b", EmergencyChecklist(other=True))
        assert "Other" not in text
