"""AnomalyFlag ORM — detected issue attached to a product submission.

Invariants:
    - submission_id references submissions.id
    - resolved defaults to False; date_resolved set only when resolved
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from cooler_admin.db.base import Base


class AnomalyFlag(Base):
    __tablename__ = "anomaly_flags"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    submission_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("submissions.id"), nullable=True,
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    severity: Mapped[str] = mapped_column(String(10), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    metadata_: Mapped[dict] = mapped_column(
        "metadata", JSON, nullable=False, default=dict,
    )
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    date_resolved: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
