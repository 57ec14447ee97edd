"""
MedLens - Text Generation Engine

Sends prompts (optionally with an inline image) to the Gemini API and
returns the raw answer text. The engine does no parsing and no retrying:
a failed call surfaces as ServiceUnavailableError for the caller to report.
"""

from typing import Optional, Dict, Any

from dotenv import load_dotenv
from google import genai
from google.genai import types

from app.core.exceptions import ServiceUnavailableError
from app.utils.logger import get_logger

load_dotenv()

logger = get_logger("llm_engine")

SERVICE_NAME = "text-generation"


class LLMEngine:
    """
    Gemini integration for medical text generation.

    All outputs are intended for informational purposes only and do not
    constitute medical diagnoses.
    """

    def __init__(self, api_key: str, model: str, client: Optional[genai.Client] = None):
        """
        Initialize the engine.

        Args:
            api_key: Gemini API key; an empty key leaves the engine unconfigured
            model: Model name, e.g. "gemini-1.5-flash"
            client: Pre-built client (tests)
        """
        self.model = model
        self.client = client
        if self.client is None and api_key:
            self.client = genai.Client(api_key=api_key)
            logger.info("Text generation provider initialized", model=self.model)
        elif self.client is None:
            logger.info("Text generation provider not configured")

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def generate(
        self,
        prompt: str,
        image: Optional[bytes] = None,
        mime_type: str = "image/jpeg"
    ) -> str:
        """
        Generate an answer for a prompt.

        Args:
            prompt: Formatted prompt text
            image: Optional image bytes sent inline with the prompt
            mime_type: MIME type of the image

        Returns:
            Raw answer text, with no guarantee about its shape

        Raises:
            ServiceUnavailableError: If the engine is unconfigured, the call
                fails, or the response carries no text
        """
        if not self.is_configured:
            raise ServiceUnavailableError(
                SERVICE_NAME, "Text generation service is not configured"
            )

        contents: list = [prompt]
        if image is not None:
            contents.append(types.Part.from_bytes(data=image, mime_type=mime_type))

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents
            )
        except Exception as e:
            logger.error("Text generation failed", model=self.model, error=str(e))
            raise ServiceUnavailableError(SERVICE_NAME, str(e)) from e

        text = getattr(response, "text", None)
        if not text or not isinstance(text, str):
            logger.error("Text generation returned no text", model=self.model)
            raise ServiceUnavailableError(
                SERVICE_NAME, "Invalid response format from text generation service"
            )

        logger.info(
            "Text generation completed",
            model=self.model,
            with_image=image is not None,
            response_length=len(text)
        )
        return text

    def get_status(self) -> Dict[str, Any]:
        """Get engine status information."""
        return {
            "provider": "gemini",
            "model": self.model,
            "configured": self.is_configured
        }
