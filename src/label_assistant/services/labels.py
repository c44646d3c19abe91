"""Label processing pipeline."""

import logging
from dataclasses import dataclass

from label_assistant.domain.labels import LabelAnalysis
from label_assistant.domain.usage import UsageKind
from label_assistant.services.label_parser import extract
from label_assistant.services.label_report import format_report
from label_assistant.services.ocr import OcrClient
from label_assistant.services.usage import UsageService

_logger = logging.getLogger(__name__)


def process(raw_text: str) -> str:
    """Turn raw OCR text into the Markdown nutrition report."""
    return format_report(extract(raw_text))


def analyze(raw_text: str) -> LabelAnalysis:
    """Parse raw OCR text, keeping the intermediate record."""
    record = extract(raw_text)
    return LabelAnalysis(raw_text=raw_text, record=record, report=format_report(record))


@dataclass
class LabelService:
    """Service that reads label images and builds their reports."""

    ocr_client: OcrClient
    usage_service: UsageService

    async def analyze_image(self, image_bytes: bytes) -> LabelAnalysis:
        """Run OCR on an image and parse the recognized text."""
        raw_text = await self.ocr_client.read_text(image_bytes)
        _logger.info(
            "Label OCR: bytes=%s chars=%s", len(image_bytes), len(raw_text)
        )
        analysis = analyze(raw_text)
        await self.usage_service.track(UsageKind.IMAGE)
        return analysis

    def analyze_text(self, raw_text: str) -> LabelAnalysis:
        """Parse text that was recognized by the client."""
        return analyze(raw_text)
