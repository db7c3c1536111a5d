"""SQLAlchemy model for license keys."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scriptguard.common.models import Base, TimestampMixin, generate_uuid

KEY_TYPES = ("temporary", "permanent", "checkpoint")


class KeyModel(Base, TimestampMixin):
    __tablename__ = "keys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("projects.project_id"), nullable=False, index=True
    )
    key: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    key_type: Mapped[str] = mapped_column(String(20), default="permanent")
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # Set once by the gate on first use, cleared only by an admin reset
    bound_fingerprint: Mapped[str | None] = mapped_column(String(255), nullable=True)
    executor: Mapped[str | None] = mapped_column(String(255), nullable=True)

    owner_identity: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
