"""Transaction Schemas — compact summary of a customer's recent transactions.

Invariants:
    - At most RECENT_TRANSACTION_LIMIT summaries are returned per customer
    - `status` comes from the upstream `statusFootprint` field
    - itemCount defaults to 0 when the upstream omits it
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

RECENT_TRANSACTION_LIMIT = 7


class TransactionSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    date_created: str | None = None
    status: str | None = None
    item_count: int = 0
    stripe_usage_id: str | None = None

    @classmethod
    def from_upstream(cls, tx: dict) -> "TransactionSummary":
        return cls(
            id=tx.get("id"),
            date_created=tx.get("dateCreated"),
            status=tx.get("statusFootprint"),
            item_count=tx.get("itemCount") or 0,
            stripe_usage_id=tx.get("stripeUsageId"),
        )


def summarize_transactions(database_counts: dict) -> tuple[list[dict], int]:
    """Reshape /database-counts into (recent summaries, total transaction count)."""
    recent = database_counts.get("recentTransactions") or []
    summaries = [
        TransactionSummary.from_upstream(tx).model_dump(by_alias=True)
        for tx in recent[:RECENT_TRANSACTION_LIMIT]
    ]
    total = (database_counts.get("counts") or {}).get("transactions") or 0
    return summaries, total
