"""Shared test fixtures."""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

import pytest

from label_assistant.config import Settings
from label_assistant.containers import AppContainer
from label_assistant.domain.usage import UsageCounts, UsageKind
from label_assistant.services.chat import ChatService, CompletionClient
from label_assistant.services.labels import LabelService
from label_assistant.services.ocr import OcrClient
from label_assistant.services.usage import UsageService, UsageStore

SAMPLE_LABEL_TEXT = """mgmNutrition Facts
Servings per container 8
Serving size 2/3 cup (55g)
Amount per serving
Calories 230
Total Fat 8g 10%
Saturated Fat 1g 5%
Trans Fat 0g
Cholesterol 0mg 0%
Sodium 160mg 7%
Total Carbohydrate 37g 13%
Dietary Fiber 4g 14%
Total Sugars 12g
Added Sugars 10g 20%
Protein 3g
Vitamin D 2mcg 10%
Calcium 260mg 20%
Iron 8mg 45%
Potassium 240mg 6%
"""


@dataclass
class FakeOcrClient(OcrClient):
    """Fake OCR client returning fixed text."""

    text: str = SAMPLE_LABEL_TEXT
    error: Exception | None = None
    gate: asyncio.Event | None = None
    images: list[bytes] = field(default_factory=list)

    async def read_text(self, image_bytes: bytes) -> str:
        self.images.append(image_bytes)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeCompletionClient(CompletionClient):
    """Fake completion client that replays scripted fragments.

    ``hang_on_call`` makes the given call (0-based) block forever after its
    fragments have been yielded, so tests can supersede it.
    """

    fragments: list[str] = field(
        default_factory=lambda: ["## Protein\n", "This label has ", "**3g**."]
    )
    error: Exception | None = None
    hang_on_call: int | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def stream(self, **kwargs) -> AsyncIterator[str]:  # type: ignore[override]
        call_index = len(self.calls)
        self.calls.append(kwargs)
        for fragment in self.fragments:
            yield fragment
        if self.error is not None:
            raise self.error
        if call_index == self.hang_on_call:
            await asyncio.Event().wait()

    async def complete(self, **kwargs) -> str:  # type: ignore[override]
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return "".join(self.fragments)


@dataclass
class InMemoryUsageStore(UsageStore):
    """In-memory usage store for tests."""

    counts: UsageCounts = field(default_factory=UsageCounts)

    async def get(self) -> UsageCounts:
        return self.counts

    async def increment(self, kind: UsageKind) -> UsageCounts:
        self.counts = self.counts.incremented(kind)
        return self.counts


@dataclass
class FailingUsageStore(UsageStore):
    """Usage store whose writes always fail."""

    async def get(self) -> UsageCounts:
        return UsageCounts()

    async def increment(self, kind: UsageKind) -> UsageCounts:
        raise RuntimeError("Usage counters row is missing")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        usage_file_path=str(tmp_path / "data" / "usage.json"),
    )


@pytest.fixture
def usage_store() -> InMemoryUsageStore:
    return InMemoryUsageStore()


@pytest.fixture
def ocr_client() -> FakeOcrClient:
    return FakeOcrClient()


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def container(
    settings: Settings,
    usage_store: InMemoryUsageStore,
    ocr_client: FakeOcrClient,
    completion_client: FakeCompletionClient,
) -> AppContainer:
    usage_service = UsageService(usage_store)
    label_service = LabelService(ocr_client=ocr_client, usage_service=usage_service)
    chat_service = ChatService(client=completion_client, model=settings.openai_model)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        usage_service=usage_service,
        label_service=label_service,
        chat_service=chat_service,
        close_resources=close_resources,
    )
