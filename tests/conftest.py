"""
Shared test fixtures.
"""

import os
from unittest.mock import AsyncMock

# Must be set before app.config is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("GOOGLE_PLACES_API_KEY", "")

import pytest

from app.core.llm_engine import LLMEngine
from tests.samples import make_image_bytes


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def fake_engine():
    """LLMEngine stand-in whose answers are set per test."""
    engine = AsyncMock(spec=LLMEngine)
    engine.is_configured = True
    return engine
