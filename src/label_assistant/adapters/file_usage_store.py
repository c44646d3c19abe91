"""JSON file usage counter store."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from label_assistant.domain.usage import UsageCounts, UsageKind
from label_assistant.services.usage import UsageStore

_logger = logging.getLogger(__name__)


@dataclass
class FileUsageStore(UsageStore):
    """Usage store persisted as a small JSON document."""

    path: Path
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def get(self) -> UsageCounts:
        """Return the stored counters, or zeros if none are readable."""
        return await asyncio.to_thread(self._read)

    async def increment(self, kind: UsageKind) -> UsageCounts:
        """Bump one counter and rewrite the file."""
        async with self._lock:
            current = await asyncio.to_thread(self._read)
            counts = current.incremented(kind)
            await asyncio.to_thread(self._write, counts)
            return counts

    def _read(self) -> UsageCounts:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return UsageCounts()
        try:
            return UsageCounts.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            _logger.warning("Resetting unreadable usage file: %s", self.path)
            return UsageCounts()

    def _write(self, counts: UsageCounts) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            counts.model_dump_json(by_alias=True), encoding="utf-8"
        )
