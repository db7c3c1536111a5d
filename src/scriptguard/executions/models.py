"""SQLAlchemy model for script execution analytics."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from scriptguard.common.models import Base, TimestampMixin, generate_uuid

EXECUTION_TYPES = ("mobile", "desktop", "unknown")


class ExecutionModel(Base, TimestampMixin):
    __tablename__ = "executions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("projects.project_id"), nullable=False, index=True
    )
    owner_identity: Mapped[str | None] = mapped_column(String(64), nullable=True)
    execution_type: Mapped[str] = mapped_column(String(20), default="unknown")
