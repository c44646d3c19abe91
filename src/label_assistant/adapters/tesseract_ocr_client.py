"""Tesseract-backed OCR client."""

import asyncio
import io
from dataclasses import dataclass

import pytesseract
from PIL import Image, UnidentifiedImageError

from label_assistant.services.ocr import OcrClient, OcrError


@dataclass
class TesseractOcrClient(OcrClient):
    """OCR client that runs a local Tesseract binary."""

    language: str = "eng"
    tesseract_cmd: str | None = None

    def __post_init__(self) -> None:
        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd

    async def read_text(self, image_bytes: bytes) -> str:
        """Recognize text in a worker thread."""
        return await asyncio.to_thread(self._recognize, image_bytes)

    def _recognize(self, image_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                return pytesseract.image_to_string(image, lang=self.language)
        except UnidentifiedImageError as exc:
            raise OcrError("Uploaded file is not a readable image") from exc
        except pytesseract.TesseractError as exc:
            raise OcrError(f"Tesseract failed: {exc}") from exc
