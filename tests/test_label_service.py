"""Tests for the label processing service."""

import asyncio

import pytest

from label_assistant.domain.labels import NOT_AVAILABLE
from label_assistant.services.labels import LabelService
from label_assistant.services.ocr import OcrError
from label_assistant.services.usage import UsageService
from tests.conftest import FailingUsageStore, FakeOcrClient, InMemoryUsageStore


def test_analyze_image_parses_ocr_text_and_counts_upload() -> None:
    store = InMemoryUsageStore()
    ocr_client = FakeOcrClient()
    service = LabelService(ocr_client=ocr_client, usage_service=UsageService(store))

    analysis = asyncio.run(service.analyze_image(b"image-bytes"))

    assert ocr_client.images == [b"image-bytes"]
    assert analysis.record.serving_info.calories == "230"
    assert "| Calories | 230 |" in analysis.report
    assert store.counts.image_uploads == 1
    assert store.counts.chat_interactions == 0


def test_analyze_image_propagates_ocr_errors() -> None:
    store = InMemoryUsageStore()
    service = LabelService(
        ocr_client=FakeOcrClient(error=OcrError("unreadable")),
        usage_service=UsageService(store),
    )

    with pytest.raises(OcrError):
        asyncio.run(service.analyze_image(b"image-bytes"))
    assert store.counts.image_uploads == 0


def test_analyze_text_skips_usage_counters() -> None:
    store = InMemoryUsageStore()
    service = LabelService(
        ocr_client=FakeOcrClient(), usage_service=UsageService(store)
    )

    analysis = service.analyze_text("Protein 3g")

    assert analysis.raw_text == "Protein 3g"
    assert analysis.record.macronutrients.protein == "3g"
    assert analysis.record.macronutrients.total_fat == NOT_AVAILABLE
    assert store.counts.image_uploads == 0


def test_analyze_image_survives_usage_store_failure() -> None:
    service = LabelService(
        ocr_client=FakeOcrClient(), usage_service=UsageService(FailingUsageStore())
    )

    analysis = asyncio.run(service.analyze_image(b"image-bytes"))

    assert analysis.record.serving_info.calories == "230"
