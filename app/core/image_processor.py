"""
Image processing for MedLens.

Prepares photos of medicine packaging for the vision-capable text
generation call: normalizes color mode, downscales and re-encodes as JPEG
so the inline payload stays within the service's size limit.
"""

import io
from dataclasses import dataclass, field
from typing import List

from PIL import Image, ImageOps, UnidentifiedImageError

from app.utils.logger import get_logger

logger = get_logger("image_processor")

EXIF_ORIENTATION = 0x0112


@dataclass
class PreparedImage:
    """Image ready to be sent inline."""

    data: bytes
    width: int
    height: int
    original_format: str
    mime_type: str = "image/jpeg"
    preprocessing_applied: List[str] = field(default_factory=list)

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class ImageProcessor:
    """
    Prepares package photos for analysis.

    Handles:
    - Loading from bytes
    - EXIF orientation and color mode normalization
    - Downscaling to a fixed width
    - JPEG re-encoding within a payload budget
    """

    def __init__(
        self,
        target_width: int = 800,
        jpeg_quality: int = 80,
        max_payload_bytes: int = 4 * 1024 * 1024
    ):
        self.target_width = target_width
        self.jpeg_quality = jpeg_quality
        self.max_payload_bytes = max_payload_bytes

    def prepare_for_analysis(self, content: bytes) -> PreparedImage:
        """
        Load, resize and re-encode an image.

        Args:
            content: Raw image bytes

        Returns:
            PreparedImage holding JPEG bytes

        Raises:
            ValueError: If the bytes are empty, not an image, or still too
                large after compression
        """
        if not content:
            raise ValueError("Invalid image data provided")

        try:
            pil_image = Image.open(io.BytesIO(content))
            pil_image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Unreadable image: {e}") from e

        original_format = pil_image.format or "UNKNOWN"
        steps = []

        if pil_image.getexif().get(EXIF_ORIENTATION, 1) != 1:
            pil_image = ImageOps.exif_transpose(pil_image)
            steps.append("exif_transpose")

        if pil_image.mode != "RGB":
            steps.append(f"{pil_image.mode}_to_RGB")
            pil_image = pil_image.convert("RGB")

        if pil_image.width > self.target_width:
            pil_image = self._resize_to_width(pil_image, self.target_width)
            steps.append(f"resize_to_width_{self.target_width}")

        buffer = io.BytesIO()
        pil_image.save(buffer, format="JPEG", quality=self.jpeg_quality)
        data = buffer.getvalue()
        steps.append(f"jpeg_quality_{self.jpeg_quality}")

        if len(data) > self.max_payload_bytes:
            raise ValueError(
                "Image size too large. Please use a smaller image or reduce image quality"
            )

        logger.info(
            "Image prepared for analysis",
            original_format=original_format,
            width=pil_image.width,
            height=pil_image.height,
            payload_bytes=len(data),
            steps=steps
        )

        return PreparedImage(
            data=data,
            width=pil_image.width,
            height=pil_image.height,
            original_format=original_format,
            preprocessing_applied=steps
        )

    def _resize_to_width(self, image: Image.Image, width: int) -> Image.Image:
        """Resize keeping the aspect ratio."""
        ratio = width / float(image.width)
        height = max(1, int(round(image.height * ratio)))
        return image.resize((width, height), Image.LANCZOS)
