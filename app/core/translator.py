"""
Machine translation for MedLens.

Long text is cut into bounded chunks (sentences first, then words) before
being sent to the MyMemory API. Chunks and list items are translated
concurrently and reassembled in their original order.
"""

import asyncio
import re
from typing import Dict, List, Optional, Sequence

import httpx

from app.core.exceptions import ServiceUnavailableError
from app.models.schemas import DrugProfile, MedicineProfile
from app.utils.logger import get_logger

logger = get_logger("translator")

SERVICE_NAME = "translation"

SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ar": "Arabic",
    "hi": "Hindi",
}

DRUG_LIST_FIELDS = ("ingredients", "uses", "side_effects", "precautions", "recommendations")
MEDICINE_LIST_FIELDS = ("ingredients", "uses", "dosage", "side_effects", "warnings")

_SENTENCE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+\Z")


# =============================================================================
# Chunking
# =============================================================================

def chunk_text(text: str, max_length: int = 500) -> List[str]:
    """
    Split text into pieces no longer than max_length.

    Sentences are packed greedily; a sentence that is too long on its own
    is packed word by word, and a word that is too long is cut. Joining
    the chunks with single spaces gives back the original text up to
    whitespace.

    Args:
        text: Text to split
        max_length: Maximum characters per chunk

    Returns:
        Ordered list of chunks
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    if len(text) <= max_length:
        return [text]

    chunks: List[str] = []
    current = ""

    for sentence in _SENTENCE.findall(text):
        if len(current) + len(sentence) <= max_length:
            current += sentence
            continue

        if current.strip():
            chunks.append(current.strip())
        current = ""

        if len(sentence) > max_length:
            chunks.extend(_split_words(sentence, max_length))
        else:
            current = sentence

    if current.strip():
        chunks.append(current.strip())
    return chunks


def _split_words(sentence: str, max_length: int) -> List[str]:
    pieces: List[str] = []
    current = ""

    for word in sentence.split():
        while len(word) > max_length:
            if current:
                pieces.append(current)
                current = ""
            pieces.append(word[:max_length])
            word = word[max_length:]
        if not word:
            continue

        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_length:
            current = candidate
        else:
            pieces.append(current)
            current = word

    if current:
        pieces.append(current)
    return pieces


def validate_language(code: str) -> str:
    """Return the normalized language code or raise ValueError."""
    normalized = (code or "").strip().lower()
    if normalized not in SUPPORTED_LANGUAGES:
        raise ValueError(
            f"Unsupported language '{code}'. "
            f"Supported: {', '.join(SUPPORTED_LANGUAGES)}"
        )
    return normalized


# =============================================================================
# Client
# =============================================================================

class Translator:
    """
    MyMemory translation client.

    A single short text that cannot be translated is an error. For text
    split into several chunks, and for list items, a failed piece keeps
    its original wording so the rest of the translation is still shown.
    """

    def __init__(
        self,
        api_url: str,
        source_language: str = "en",
        chunk_size: int = 500,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_url = api_url
        self.source_language = source_language
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def needs_translation(self, text: Optional[str], target: str) -> bool:
        return bool(text) and target != self.source_language

    async def translate_text(self, text: str, target: str) -> str:
        """
        Translate text of any length.

        Args:
            text: Source text
            target: Target language code

        Returns:
            Translated text (the input itself for empty text or the source language)

        Raises:
            ValueError: If the language is not supported
            ServiceUnavailableError: If a single-chunk translation fails
        """
        target = validate_language(target)
        if not self.needs_translation(text, target):
            return text

        async with self._client() as client:
            return await self._translate(client, text, target)

    async def translate_items(self, items: Sequence[str], target: str) -> List[str]:
        """Translate list items concurrently, keeping their order."""
        target = validate_language(target)
        if not items or target == self.source_language:
            return list(items)

        async with self._client() as client:
            return await self._translate_items(client, items, target)

    async def translate_drug_profile(self, profile: DrugProfile, target: str) -> DrugProfile:
        """
        Translate the description and list fields of a drug profile.

        Interaction records are left as they are. Returns a new profile.
        """
        target = validate_language(target)
        if target == self.source_language:
            return profile

        async with self._client() as client:
            description, *lists = await asyncio.gather(
                self._translate_or_keep(client, profile.description, target, "description"),
                *(
                    self._translate_items(client, getattr(profile, name), target)
                    for name in DRUG_LIST_FIELDS
                )
            )

        update = dict(zip(DRUG_LIST_FIELDS, lists))
        update["description"] = description
        logger.info("Drug profile translated", drug=profile.name, target=target)
        return profile.model_copy(update=update)

    async def translate_medicine_profile(
        self,
        profile: MedicineProfile,
        target: str
    ) -> MedicineProfile:
        """Translate the list fields of a medicine profile. Returns a new profile."""
        target = validate_language(target)
        if target == self.source_language:
            return profile

        async with self._client() as client:
            lists = await asyncio.gather(
                *(
                    self._translate_items(client, getattr(profile, name), target)
                    for name in MEDICINE_LIST_FIELDS
                )
            )

        logger.info("Medicine profile translated", medicine=profile.name, target=target)
        return profile.model_copy(update=dict(zip(MEDICINE_LIST_FIELDS, lists)))

    async def _translate(self, client: httpx.AsyncClient, text: str, target: str) -> str:
        chunks = chunk_text(text, self.chunk_size)

        if len(chunks) == 1:
            return await self._request(client, chunks[0], target) or text

        results = await asyncio.gather(
            *(self._request(client, chunk, target) for chunk in chunks),
            return_exceptions=True
        )

        translated = []
        failed = 0
        for index, (chunk, result) in enumerate(zip(chunks, results)):
            if isinstance(result, ServiceUnavailableError) or not result:
                failed += 1
                logger.warning("Chunk translation failed", chunk=index, error=str(result))
                translated.append(chunk)
            elif isinstance(result, BaseException):
                raise result
            else:
                translated.append(result)

        if failed:
            logger.warning("Partial translation may be incomplete", failed_chunks=failed, total_chunks=len(chunks))

        return " ".join(" ".join(translated).split())

    async def _translate_items(
        self,
        client: httpx.AsyncClient,
        items: Sequence[str],
        target: str
    ) -> List[str]:
        return list(await asyncio.gather(
            *(self._translate_or_keep(client, item, target, "item") for item in items)
        ))

    async def _translate_or_keep(
        self,
        client: httpx.AsyncClient,
        text: str,
        target: str,
        field: str
    ) -> str:
        if not self.needs_translation(text, target):
            return text
        try:
            return await self._translate(client, text, target)
        except ServiceUnavailableError as e:
            logger.warning("Translation failed, keeping original", field=field, error=e.message)
            return text

    async def _request(self, client: httpx.AsyncClient, text: str, target: str) -> str:
        """Send one chunk to the translation API."""
        params = {"q": text, "langpair": f"{self.source_language}|{target}"}
        try:
            response = await client.get(self.api_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ServiceUnavailableError(SERVICE_NAME, f"Translation request failed: {e}") from e

        if not isinstance(data, dict) or str(data.get("responseStatus")) != "200":
            details = data.get("responseDetails") if isinstance(data, dict) else None
            raise ServiceUnavailableError(SERVICE_NAME, details or "Translation failed")

        return (data.get("responseData") or {}).get("translatedText") or ""
