"""SQLAlchemy model for admin accounts."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from scriptguard.common.models import Base, TimestampMixin


class AdminModel(Base, TimestampMixin):
    __tablename__ = "admins"

    admin_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
