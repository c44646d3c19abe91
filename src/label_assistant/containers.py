"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from label_assistant.adapters.file_usage_store import FileUsageStore
from label_assistant.adapters.kv_usage_store import HttpxKeyValueUsageStore
from label_assistant.adapters.openai_completion_client import OpenAICompletionClient
from label_assistant.adapters.openai_vision_client import OpenAIVisionOcrClient
from label_assistant.adapters.supabase_usage_store import SupabaseUsageStore
from label_assistant.adapters.tesseract_ocr_client import TesseractOcrClient
from label_assistant.config import Settings
from label_assistant.services.assistant import LabelAssistant
from label_assistant.services.chat import ChatService
from label_assistant.services.labels import LabelService
from label_assistant.services.ocr import OcrClient
from label_assistant.services.usage import UsageService, UsageStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    usage_service: UsageService
    label_service: LabelService
    chat_service: ChatService
    close_resources: Callable[[], Awaitable[None]]

    def new_assistant(self) -> LabelAssistant:
        """Create the conversation state for one client session."""
        return LabelAssistant(
            label_service=self.label_service,
            chat_service=self.chat_service,
            usage_service=self.usage_service,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    closers: list[Callable[[], Awaitable[None]]] = []

    usage_store = _build_usage_store(resolved_settings, closers)
    usage_service = UsageService(usage_store)
    label_service = LabelService(
        ocr_client=_build_ocr_client(resolved_settings),
        usage_service=usage_service,
    )
    completion_client = OpenAICompletionClient.create(resolved_settings.openai_api_key)
    chat_service = ChatService(
        client=completion_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        max_tokens=resolved_settings.openai_max_tokens,
        presence_penalty=resolved_settings.openai_presence_penalty,
        frequency_penalty=resolved_settings.openai_frequency_penalty,
    )

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        usage_service=usage_service,
        label_service=label_service,
        chat_service=chat_service,
        close_resources=close_resources,
    )


def _build_ocr_client(settings: Settings) -> OcrClient:
    if settings.ocr_backend == "tesseract":
        return TesseractOcrClient(
            language=settings.ocr_language,
            tesseract_cmd=settings.tesseract_cmd,
        )
    if settings.ocr_backend == "openai":
        return OpenAIVisionOcrClient.create(
            api_key=settings.openai_api_key,
            model=settings.openai_vision_model,
        )
    raise ValueError(f"Unknown OCR backend: {settings.ocr_backend}")


def _build_usage_store(
    settings: Settings, closers: list[Callable[[], Awaitable[None]]]
) -> UsageStore:
    if settings.usage_backend == "file":
        return FileUsageStore(Path(settings.usage_file_path))
    if settings.usage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase usage backend requires URL and service key")
        return SupabaseUsageStore(
            create_client(settings.supabase_url, settings.supabase_service_key)
        )
    if settings.usage_backend == "kv":
        if not settings.kv_rest_url or not settings.kv_rest_token:
            raise ValueError("Key-value usage backend requires URL and token")
        store = HttpxKeyValueUsageStore.create(
            base_url=settings.kv_rest_url,
            token=settings.kv_rest_token,
            key=settings.kv_usage_key,
        )
        closers.append(store.close)
        return store
    raise ValueError(f"Unknown usage backend: {settings.usage_backend}")
