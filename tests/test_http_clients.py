"""Tests for OCR and completion adapters."""

import asyncio
import io
from types import SimpleNamespace

import pytesseract
import pytest
from PIL import Image

from label_assistant.adapters.openai_completion_client import OpenAICompletionClient
from label_assistant.adapters.openai_vision_client import OpenAIVisionOcrClient
from label_assistant.adapters.tesseract_ocr_client import TesseractOcrClient
from label_assistant.services.ocr import OcrError, to_data_url


def _chunk(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(delta=SimpleNamespace(content=content))]
    )


async def _chunk_stream(chunks: list[SimpleNamespace]):  # type: ignore[no-untyped-def]
    for chunk in chunks:
        yield chunk


class _FakeCompletions:
    def __init__(self) -> None:
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if kwargs["stream"]:
            return _chunk_stream(
                [
                    _chunk("## Answer"),
                    _chunk(None),
                    SimpleNamespace(choices=[]),
                    _chunk(" text"),
                ]
            )
        message = SimpleNamespace(content="Full answer")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class _FakeChatOpenAI:
    def __init__(self) -> None:
        self.chat = SimpleNamespace(completions=_FakeCompletions())


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeVisionOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)


_REQUEST = {
    "model": "gpt-4",
    "messages": [{"role": "user", "content": "Hi"}],
    "temperature": 0.7,
    "max_tokens": 500,
    "presence_penalty": 0.1,
    "frequency_penalty": 0.1,
}


def test_openai_completion_client_streams_content_deltas() -> None:
    fake = _FakeChatOpenAI()
    client = OpenAICompletionClient(client=fake)

    async def collect() -> list[str]:
        return [fragment async for fragment in client.stream(**_REQUEST)]

    fragments = asyncio.run(collect())

    assert fragments == ["## Answer", " text"]
    assert fake.chat.completions.last_payload["stream"] is True
    assert fake.chat.completions.last_payload["max_tokens"] == 500


def test_openai_completion_client_returns_full_message() -> None:
    fake = _FakeChatOpenAI()
    client = OpenAICompletionClient(client=fake)

    result = asyncio.run(client.complete(**_REQUEST))

    assert result == "Full answer"
    assert fake.chat.completions.last_payload["stream"] is False


def test_openai_vision_client_transcribes_label() -> None:
    fake = _FakeVisionOpenAI("Calories 120")
    client = OpenAIVisionOcrClient(client=fake, model="gpt-4o")

    text = asyncio.run(client.read_text(b"\x89PNG\r\n\x1a\nrest"))

    assert text == "Calories 120"
    payload = fake.responses.last_payload
    assert payload["model"] == "gpt-4o"
    image_part = payload["input"][0]["content"][1]
    assert image_part["image_url"].startswith("data:image/png;base64,")


def test_openai_vision_client_rejects_empty_output() -> None:
    client = OpenAIVisionOcrClient(client=_FakeVisionOpenAI(""), model="gpt-4o")

    with pytest.raises(OcrError):
        asyncio.run(client.read_text(b"image"))


def test_tesseract_client_reads_image(monkeypatch) -> None:
    seen: dict[str, object] = {}

    def fake_image_to_string(image, lang):  # type: ignore[no-untyped-def]
        seen["size"] = image.size
        seen["lang"] = lang
        return "Calories 120"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
    buffer = io.BytesIO()
    Image.new("RGB", (8, 4), color="white").save(buffer, format="PNG")

    text = asyncio.run(TesseractOcrClient().read_text(buffer.getvalue()))

    assert text == "Calories 120"
    assert seen == {"size": (8, 4), "lang": "eng"}


def test_tesseract_client_rejects_non_images() -> None:
    with pytest.raises(OcrError):
        asyncio.run(TesseractOcrClient().read_text(b"not an image"))


def test_to_data_url_detects_webp_and_defaults_to_jpeg() -> None:
    webp = b"RIFF\x00\x00\x00\x00WEBPdata"

    assert to_data_url(webp).startswith("data:image/webp;base64,")
    assert to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
