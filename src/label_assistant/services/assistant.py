"""Per-session label assistant with request superseding."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from label_assistant.domain.chat import ChatMessage
from label_assistant.domain.labels import LabelAnalysis
from label_assistant.domain.usage import UsageKind
from label_assistant.services.chat import ChatService
from label_assistant.services.labels import LabelService
from label_assistant.services.usage import UsageService

_logger = logging.getLogger(__name__)

UpdateCallback = Callable[[ChatMessage], Awaitable[None]]


class LabelNotLoadedError(RuntimeError):
    """Raised when a question is asked before any label was read."""


@dataclass
class LabelAssistant:
    """Conversation state for one client.

    At most one image load and one answer are in flight. A new image cancels
    both; a new question only cancels the previous answer and waits for a
    pending image load, so it is always answered against the newest label.
    Each assistant message only ever receives fragments from its own request.
    """

    label_service: LabelService
    chat_service: ChatService
    usage_service: UsageService
    messages: list[ChatMessage] = field(default_factory=list)
    analysis: LabelAnalysis | None = None
    _loading: "asyncio.Task[LabelAnalysis] | None" = field(
        default=None, init=False, repr=False
    )
    _answering: "asyncio.Task[ChatMessage] | None" = field(
        default=None, init=False, repr=False
    )

    @property
    def report(self) -> str | None:
        """Markdown report of the loaded label, if any."""
        return self.analysis.report if self.analysis else None

    @property
    def busy(self) -> bool:
        return _pending(self._loading) is not None or (
            _pending(self._answering) is not None
        )

    def start_image(
        self, image_bytes: bytes, on_update: UpdateCallback | None = None
    ) -> "asyncio.Task[LabelAnalysis]":
        """Start reading a new label image, superseding any in-flight request."""
        self._supersede()
        task = asyncio.get_running_loop().create_task(
            self._load_image(image_bytes, on_update)
        )
        self._loading = task
        return task

    def start_question(
        self, question: str, on_update: UpdateCallback | None = None
    ) -> "asyncio.Task[ChatMessage]":
        """Start answering a question, superseding any in-flight answer."""
        loading = _pending(self._loading)
        if self.analysis is None and loading is None:
            raise LabelNotLoadedError("Load a nutrition label before asking")
        if not question.strip():
            raise ValueError("Question must not be blank")
        _cancel(self._answering)
        task = asyncio.get_running_loop().create_task(
            self._answer(loading, question, on_update)
        )
        self._answering = task
        return task

    async def load_image(
        self, image_bytes: bytes, on_update: UpdateCallback | None = None
    ) -> LabelAnalysis:
        """Read a label image and reset the conversation around its report."""
        return await self.start_image(image_bytes, on_update)

    def load_text(self, raw_text: str) -> LabelAnalysis:
        """Reset the conversation around text recognized by the client."""
        self._supersede()
        analysis = self.label_service.analyze_text(raw_text)
        self._reset(analysis)
        return analysis

    async def ask(
        self, question: str, on_update: UpdateCallback | None = None
    ) -> ChatMessage:
        """Answer a question about the loaded label."""
        return await self.start_question(question, on_update)

    async def cancel(self) -> None:
        """Cancel in-flight requests and wait for them to stop."""
        cancelled = self._supersede()
        if cancelled:
            await asyncio.gather(*cancelled, return_exceptions=True)

    def _supersede(self) -> "list[asyncio.Task[Any]]":
        tasks = [self._loading, self._answering]
        self._loading = None
        self._answering = None
        return [task for task in tasks if _cancel(task)]

    def _reset(self, analysis: LabelAnalysis) -> ChatMessage:
        self.analysis = analysis
        opening = ChatMessage(role="assistant", content=analysis.report)
        self.messages = [opening]
        return opening

    async def _load_image(
        self, image_bytes: bytes, on_update: UpdateCallback | None
    ) -> LabelAnalysis:
        analysis = await self.label_service.analyze_image(image_bytes)
        opening = self._reset(analysis)
        if on_update is not None:
            await on_update(opening)
        return analysis

    async def _answer(
        self,
        loading: "asyncio.Task[LabelAnalysis] | None",
        question: str,
        on_update: UpdateCallback | None,
    ) -> ChatMessage:
        if loading is not None:
            # asyncio.wait leaves the load running if this answer is cancelled.
            await asyncio.wait({loading})
            if loading.cancelled() or loading.exception() is not None:
                raise LabelNotLoadedError("The new label image could not be read")
        analysis = self.analysis
        if analysis is None:
            raise LabelNotLoadedError("Load a nutrition label before asking")
        self.messages.append(ChatMessage(role="user", content=question))
        reply = ChatMessage(role="assistant")
        self.messages.append(reply)
        await self.usage_service.track(UsageKind.CHAT)
        async for fragment in self.chat_service.stream_answer(
            analysis.raw_text, question
        ):
            reply.append(fragment)
            if on_update is not None:
                await on_update(reply)
        return reply


def _pending(task: "asyncio.Task[Any] | None") -> "asyncio.Task[Any] | None":
    if task is not None and not task.done():
        return task
    return None


def _cancel(task: "asyncio.Task[Any] | None") -> bool:
    if _pending(task) is None:
        return False
    _logger.info("Cancelling superseded assistant request")
    task.cancel()  # type: ignore[union-attr]
    return True
