"""
Upload validation utilities for MedLens.

Handles validation of uploaded package photos:
- File size limits
- File extension validation
- Content signature verification
- Corruption detection
"""

import io
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

# (signature, mime type); WebP additionally carries "WEBP" at offset 8
IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8", "image/jpeg"),
    (b"RIFF", "image/webp"),
)


class FileValidationError(Exception):
    """Raised when file validation fails."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class FileValidator:
    """
    Validates uploaded images.

    Ensures files are:
    - Within size limits
    - Have allowed extensions
    - Carry an image signature
    - Are not corrupt
    """

    MIN_DIMENSION = 50
    MAX_DIMENSION = 10000

    def __init__(self, max_file_size: int, image_extensions: List[str]):
        self.max_file_size = max_file_size
        self.image_extensions = image_extensions

    def validate_file_size(self, file_content: bytes, filename: str) -> bool:
        """
        Check if file is within size limits.

        Raises:
            FileValidationError: If file is empty or exceeds the size limit
        """
        if len(file_content) == 0:
            raise FileValidationError("Empty file uploaded", error_code="EMPTY_FILE")
        if len(file_content) > self.max_file_size:
            raise FileValidationError(
                f"File '{filename}' exceeds maximum size of "
                f"{self.max_file_size // (1024 * 1024)}MB",
                error_code="FILE_TOO_LARGE"
            )
        return True

    def validate_extension(self, filename: str) -> bool:
        """
        Check if file has an allowed extension.

        Raises:
            FileValidationError: If extension not allowed
        """
        ext = Path(filename or "").suffix.lower()
        if ext not in self.image_extensions:
            raise FileValidationError(
                f"File extension '{ext}' not allowed. "
                f"Allowed: {', '.join(self.image_extensions)}",
                error_code="INVALID_EXTENSION"
            )
        return True

    def detect_mime_type(self, content: bytes) -> Optional[str]:
        """Detect the image MIME type from its file signature."""
        for signature, mime_type in IMAGE_SIGNATURES:
            if content.startswith(signature):
                if mime_type == "image/webp" and content[8:12] != b"WEBP":
                    continue
                return mime_type
        return None

    def validate_image(self, file_content: bytes, filename: Optional[str]) -> str:
        """
        Validate an uploaded package photo.

        Args:
            file_content: Raw upload bytes
            filename: Client-supplied file name

        Returns:
            Detected MIME type

        Raises:
            FileValidationError: On the first check that fails
        """
        filename = filename or ""
        self.validate_extension(filename)
        self.validate_file_size(file_content, filename)

        mime_type = self.detect_mime_type(file_content)
        if mime_type is None:
            raise FileValidationError(
                "File content is not a supported image",
                error_code="INVALID_CONTENT"
            )

        width, height = self._read_dimensions(file_content)
        if width < self.MIN_DIMENSION or height < self.MIN_DIMENSION:
            raise FileValidationError(
                "Image dimensions too small for analysis",
                error_code="IMAGE_TOO_SMALL"
            )
        if width > self.MAX_DIMENSION or height > self.MAX_DIMENSION:
            raise FileValidationError(
                "Image dimensions too large",
                error_code="IMAGE_TOO_LARGE"
            )
        return mime_type

    @staticmethod
    def _read_dimensions(file_content: bytes) -> Tuple[int, int]:
        try:
            with Image.open(io.BytesIO(file_content)) as img:
                img.verify()
            # verify() leaves the image unusable; reopen for dimensions
            with Image.open(io.BytesIO(file_content)) as img:
                return img.size
        except Exception as e:
            raise FileValidationError(
                f"Corrupt or unreadable image: {e}",
                error_code="CORRUPT_IMAGE"
            ) from e
