"""Text recognition interfaces for label images."""

import base64
from typing import Protocol

TRANSCRIPTION_PROMPT = (
    "Transcribe all text on this nutrition facts label exactly as printed. "
    "Keep label names, numbers, units and percent values verbatim. "
    "Return plain text only, with no commentary."
)


class OcrError(RuntimeError):
    """Raised when an image cannot be turned into text."""


class OcrClient(Protocol):
    """Interface for image-to-text recognition."""

    async def read_text(self, image_bytes: bytes) -> str:
        """Return the raw recognized text of an image."""


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
