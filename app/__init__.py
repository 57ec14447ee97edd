"""
MedLens - Health Information Service

Turns free-text answers from generative-AI and translation services into
structured records: symptom assessments, drug profiles with interaction
warnings, scanned medicine details, and nearby doctor listings.

IMPORTANT: This is NOT a diagnosis tool. It must NEVER replace a doctor.
"""

__version__ = "1.0.0"
__author__ = "MedLens Team"
