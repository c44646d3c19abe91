"""Redis REST key-value usage counter store."""

from dataclasses import dataclass

import httpx

from label_assistant.domain.usage import UsageCounts, UsageKind
from label_assistant.services.usage import UsageStore

_FIELDS = {
    UsageKind.IMAGE: "imageUploads",
    UsageKind.CHAT: "chatInteractions",
}


@dataclass
class HttpxKeyValueUsageStore(UsageStore):
    """Usage store kept in a hash on a Redis REST endpoint."""

    base_url: str
    token: str
    http_client: httpx.AsyncClient
    key: str = "usage"

    @classmethod
    def create(
        cls, base_url: str, token: str, key: str = "usage"
    ) -> "HttpxKeyValueUsageStore":
        """Create a store with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            token=token,
            http_client=httpx.AsyncClient(),
            key=key,
        )

    async def get(self) -> UsageCounts:
        """Read both counters with HGETALL."""
        result = await self._command(["HGETALL", self.key])
        return _parse_hash(result)

    async def increment(self, kind: UsageKind) -> UsageCounts:
        """Bump one counter with HINCRBY and return the full hash."""
        await self._command(["HINCRBY", self.key, _FIELDS[kind], "1"])
        return await self.get()

    async def _command(self, command: list[str]) -> object:
        response = await self.http_client.post(
            self.base_url,
            headers={"Authorization": f"Bearer {self.token}"},
            json=command,
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        if "error" in payload:
            raise RuntimeError(f"Key-value command failed: {payload['error']}")
        return payload.get("result")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _parse_hash(result: object) -> UsageCounts:
    """Parse HGETALL output, a flat list or a mapping of field to value."""
    if isinstance(result, list):
        values = dict(zip(result[::2], result[1::2], strict=False))
    elif isinstance(result, dict):
        values = result
    else:
        values = {}
    return UsageCounts(
        image_uploads=int(values.get("imageUploads") or 0),
        chat_interactions=int(values.get("chatInteractions") or 0),
    )
