"""Supabase-backed usage counter store."""

from dataclasses import dataclass

from supabase import Client

from label_assistant.domain.usage import UsageCounts, UsageKind
from label_assistant.services.usage import UsageStore

_COLUMNS = {
    UsageKind.IMAGE: "image_uploads",
    UsageKind.CHAT: "chat_interactions",
}


@dataclass
class SupabaseUsageStore(UsageStore):
    """Supabase implementation for usage counters.

    Counters live in a single row. Increments go through the
    ``increment_usage_counter`` database function so concurrent requests do
    not lose updates; both are created by
    ``supabase/migrations/20261019000000_usage_counters.sql``.
    """

    client: Client
    table: str = "usage_counters"
    row_id: int = 1

    async def get(self) -> UsageCounts:
        """Return the counters row."""
        response = (
            self.client.table(self.table)
            .select("image_uploads, chat_interactions")
            .eq("id", self.row_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Usage counters row is missing")
        return _parse_row(response.data[0])

    async def increment(self, kind: UsageKind) -> UsageCounts:
        """Atomically bump one counter."""
        response = self.client.rpc(
            "increment_usage_counter",
            {"counter_name": _COLUMNS[kind], "row_id": self.row_id},
        ).execute()
        rows = response.data
        if isinstance(rows, list):
            rows = rows[0] if rows else None
        if not rows:
            raise RuntimeError("Failed to increment usage counter")
        return _parse_row(rows)


def _parse_row(row: dict[str, object]) -> UsageCounts:
    return UsageCounts(
        image_uploads=int(row.get("image_uploads") or 0),
        chat_interactions=int(row.get("chat_interactions") or 0),
    )
