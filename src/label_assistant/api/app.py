"""FastAPI application factory."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import Any

from fastapi import (
    FastAPI,
    File,
    HTTPException,
    Request,
    UploadFile,
    WebSocket,
    status,
)
from fastapi.responses import StreamingResponse
from fastapi.websockets import WebSocketState

from label_assistant.api.models import (
    ChatRequest,
    LabelResponse,
    LabelTextRequest,
    UsageRequest,
)
from label_assistant.app_logging import configure_logging
from label_assistant.containers import AppContainer
from label_assistant.domain.chat import ChatMessage
from label_assistant.domain.usage import UsageKind
from label_assistant.services.assistant import LabelAssistant, LabelNotLoadedError
from label_assistant.services.ocr import OcrError

RELAY_ERROR_MESSAGE = "Sorry, something went wrong while handling your request."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/labels")
    async def read_label(
        request: Request, file: UploadFile = File(...)
    ) -> LabelResponse:
        """Run OCR on an uploaded label image and parse it."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await file.read()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload"
            )
        try:
            analysis = await state_container.label_service.analyze_image(image_bytes)
        except OcrError as exc:
            logger.exception("Label OCR failed", extra={"upload_name": file.filename})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return LabelResponse.from_analysis(analysis)

    @app.post("/api/labels/text")
    async def parse_label_text(
        payload: LabelTextRequest, request: Request
    ) -> LabelResponse:
        """Parse label text recognized on the client."""
        state_container: AppContainer = request.app.state.container
        analysis = state_container.label_service.analyze_text(payload.text)
        return LabelResponse.from_analysis(analysis)

    @app.post("/api/chat")
    async def chat(payload: ChatRequest, request: Request) -> StreamingResponse:
        """Stream an answer about a label as plain text."""
        state_container: AppContainer = request.app.state.container
        if not payload.question.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Question is empty"
            )
        await state_container.usage_service.track(UsageKind.CHAT)
        fragments = state_container.chat_service.stream_answer(
            payload.nutrition_text, payload.question
        )
        return StreamingResponse(fragments, media_type="text/plain; charset=utf-8")

    @app.get("/api/usage")
    async def get_usage(request: Request) -> dict[str, int]:
        """Return usage counters."""
        state_container: AppContainer = request.app.state.container
        counts = await state_container.usage_service.get()
        return counts.model_dump(by_alias=True)

    @app.post("/api/usage")
    async def record_usage(payload: UsageRequest, request: Request) -> dict[str, int]:
        """Bump a usage counter by type name."""
        state_container: AppContainer = request.app.state.container
        counts = await state_container.usage_service.record(payload.type)
        return counts.model_dump(by_alias=True)

    @app.websocket("/ws/assistant")
    async def assistant_socket(websocket: WebSocket) -> None:
        """Interactive session: binary frames load images, JSON frames ask."""
        state_container: AppContainer = websocket.app.state.container
        assistant = state_container.new_assistant()
        pending: set[asyncio.Task[None]] = set()
        await websocket.accept()
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                if message.get("bytes") is not None:
                    relay = _relay_image(websocket, assistant, message["bytes"])
                else:
                    relay = _relay_question(
                        websocket, assistant, _parse_question(message.get("text"))
                    )
                task = asyncio.create_task(_guarded(websocket, relay))
                pending.add(task)
                task.add_done_callback(pending.discard)
        finally:
            await assistant.cancel()
            running = list(pending)
            for task in running:
                task.cancel()
            await asyncio.gather(*running, return_exceptions=True)

    async def _guarded(
        websocket: WebSocket, relay: Coroutine[Any, Any, None]
    ) -> None:
        try:
            await relay
        except Exception:
            logger.exception("Assistant request failed")
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.send_json(
                    {"type": "error", "content": RELAY_ERROR_MESSAGE}
                )

    async def _relay_image(
        websocket: WebSocket, assistant: LabelAssistant, image_bytes: bytes
    ) -> None:
        async def send_report(message: ChatMessage) -> None:
            await websocket.send_json({"type": "report", "content": message.content})

        try:
            await assistant.load_image(image_bytes, on_update=send_report)
        except OcrError as exc:
            logger.exception("Label OCR failed")
            await websocket.send_json({"type": "error", "content": str(exc)})

    async def _relay_question(
        websocket: WebSocket, assistant: LabelAssistant, question: str
    ) -> None:
        sent = 0

        async def send_fragment(message: ChatMessage) -> None:
            nonlocal sent
            fragment = message.content[sent:]
            sent = len(message.content)
            await websocket.send_json({"type": "fragment", "content": fragment})

        try:
            reply = await assistant.ask(question, on_update=send_fragment)
        except (LabelNotLoadedError, ValueError) as exc:
            await websocket.send_json({"type": "error", "content": str(exc)})
            return
        await websocket.send_json({"type": "done", "content": reply.content})

    return app


def _parse_question(text: str | None) -> str:
    """Extract the question from a JSON text frame; plain text is accepted."""
    if not text:
        return ""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(payload, dict):
        return str(payload.get("question", ""))
    return text
