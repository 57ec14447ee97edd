"""
Prompt templates and their section marker tables.

Each prompt fixes the section count, order and wording of the answer; the
marker table next to it is what the section extractor uses to read that
answer back. Changing a heading in a prompt means changing the matching
table entry in the same commit.
"""

from typing import List, Sequence

from app.core.section_extractor import MarkerStyle, SectionMarker

# =============================================================================
# Symptom Assessment
# =============================================================================

SYMPTOM_PROMPT = """Analyze the following symptoms and provide a detailed medical analysis and give answers briefly:
{description}

Please include:
1. Possible conditions (in brief)
2. Severity level
3. Recommended actions
4. When to seek immediate medical attention"""

SYMPTOM_MARKERS: List[SectionMarker] = [
    SectionMarker("1.", "conditions", title="Possible conditions"),
    SectionMarker("2.", "severity", title="Severity level"),
    SectionMarker("3.", "recommendations", title="Recommended actions"),
    SectionMarker("4.", "urgent", title="When to seek immediate medical attention"),
]


def build_symptom_prompt(
    symptoms: Sequence[str],
    duration: str = "",
    severity: str = "",
    additional_notes: str = ""
) -> str:
    """Build the symptom assessment prompt from the user's answers."""
    description = (
        f"Symptoms: {', '.join(symptoms)}\n"
        f"Duration: {duration}\n"
        f"Severity: {severity}\n"
        f"Additional Notes: {additional_notes}"
    )
    return SYMPTOM_PROMPT.format(description=description)


def build_emergency_prompt(situation_description: str) -> str:
    """Emergency assessments reuse the symptom sections."""
    return SYMPTOM_PROMPT.format(description=situation_description)


# =============================================================================
# Drug Analysis
# =============================================================================

DRUG_PROMPT = """As a medical expert, analyze the following drug(s) and provide detailed information:
{drugs}

Provide a detailed analysis in this EXACT format. For each section, provide specific, detailed information:

1. Drug Overview: Provide a clear, detailed description of the drug's primary purpose and classification
2. Active Ingredients: List each main active ingredient with its purpose
3. Common Uses: List each specific medical condition or symptom this drug treats
4. Side Effects: List both common and serious side effects, clearly labeled
5. Precautions: List specific warnings, contraindications, and safety information
6. Interactions: For each interaction, provide:
   - Drug/Substance: Name of interacting substance
   - Severity: Specify as "High", "Moderate", or "Low"
   - Description: Brief explanation of the interaction
   - Recommendation: Specific guidance for managing the interaction
7. Recommendations: Provide specific usage guidelines, dosing information, and best practices

Be thorough and specific in your response while maintaining this exact structure. For each section after Drug Overview, provide the information as a bulleted list using dashes (-). For interactions, ensure each entry includes all four components (Drug/Substance, Severity, Description, Recommendation)."""

DRUG_MARKERS: List[SectionMarker] = [
    SectionMarker("Drug Overview", "overview", MarkerStyle.KEYWORD),
    SectionMarker("Active Ingredients", "ingredients", MarkerStyle.KEYWORD),
    SectionMarker("Common Uses", "uses", MarkerStyle.KEYWORD),
    SectionMarker("Side Effects", "side_effects", MarkerStyle.KEYWORD),
    SectionMarker("Precautions", "precautions", MarkerStyle.KEYWORD),
    SectionMarker("Interactions", "interactions", MarkerStyle.KEYWORD),
    SectionMarker("Recommendations", "recommendations", MarkerStyle.KEYWORD),
]


def build_drug_prompt(drugs: Sequence[str]) -> str:
    return DRUG_PROMPT.format(drugs="\n".join(drugs))


# =============================================================================
# Medicine Package Scan
# =============================================================================

MEDICINE_NAME_PROMPT = (
    "You are a medical expert. Please analyze this medicine package image and "
    "extract ONLY the medicine name/brand name. Return just the name, nothing else."
)

MEDICINE_DETAILS_PROMPT = """As a medical expert, analyze and provide detailed information about the medicine "{name}".

Provide the information in this EXACT format (include the numbers and maintain exact section titles):
1. Active ingredients: [List the main active ingredients]
2. Primary uses: [List the main medical conditions or symptoms this medicine treats]
3. Recommended dosage: [Provide standard dosing information]
4. Side effects: [List common and serious side effects]
5. Warnings and precautions: [List important warnings and safety information]

Be specific and detailed in your response while maintaining this exact structure."""

MEDICINE_MARKERS: List[SectionMarker] = [
    SectionMarker("Active ingredients", "ingredients", MarkerStyle.KEYWORD),
    SectionMarker("Primary uses", "uses", MarkerStyle.KEYWORD),
    SectionMarker("Recommended dosage", "dosage", MarkerStyle.KEYWORD),
    SectionMarker("Side effects", "side_effects", MarkerStyle.KEYWORD),
    SectionMarker("Warnings and precautions", "warnings", MarkerStyle.KEYWORD),
]


def build_medicine_details_prompt(name: str) -> str:
    return MEDICINE_DETAILS_PROMPT.format(name=name)
