"""Usage counter service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from label_assistant.domain.usage import UsageCounts, UsageKind

_logger = logging.getLogger(__name__)


class UsageStore(Protocol):
    """Persistence interface for usage counters."""

    async def get(self) -> UsageCounts:
        """Return the current counters."""

    async def increment(self, kind: UsageKind) -> UsageCounts:
        """Bump one counter and return the updated counters."""


@dataclass
class UsageService:
    """Service for reading and bumping usage counters."""

    store: UsageStore

    async def get(self) -> UsageCounts:
        """Return the current counters."""
        return await self.store.get()

    async def increment(self, kind: UsageKind) -> UsageCounts:
        """Bump the counter for ``kind``."""
        counts = await self.store.increment(kind)
        _logger.info(
            "Usage %s: images=%s chats=%s",
            kind.value,
            counts.image_uploads,
            counts.chat_interactions,
        )
        return counts

    async def track(self, kind: UsageKind) -> None:
        """Bump the counter for ``kind``; store failures are only logged."""
        try:
            await self.increment(kind)
        except Exception:
            _logger.exception("Failed to record %s usage", kind.value)

    async def record(self, kind_name: str) -> UsageCounts:
        """Bump a counter by its raw type name; unknown names are ignored."""
        try:
            kind = UsageKind(kind_name)
        except ValueError:
            _logger.warning("Ignoring unknown usage type: %s", kind_name)
            return await self.store.get()
        return await self.increment(kind)
