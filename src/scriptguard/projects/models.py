"""SQLAlchemy models for projects, admin grants and project API keys."""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from scriptguard.common.models import Base, TimestampMixin, generate_uuid

LICENSE_MODES = ("paid", "free-paywall")


class ProjectModel(Base, TimestampMixin):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "license_mode IN (" + ", ".join(f"'{m}'" for m in LICENSE_MODES) + ")",
            name="ck_project_license_mode",
        ),
    )

    project_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    author_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    license_mode: Mapped[str] = mapped_column(String(20), default="paid")

    github_owner: Mapped[str] = mapped_column(String(255), nullable=False)
    github_repo: Mapped[str] = mapped_column(String(255), nullable=False)
    github_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    github_token: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Lifetime of keys issued through the external paywall flow
    paywall_key_minutes: Mapped[int] = mapped_column(Integer, default=1)
    companion_link: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class ProjectAdminModel(Base, TimestampMixin):
    __tablename__ = "project_admins"
    __table_args__ = (
        UniqueConstraint("project_id", "admin_id", name="uq_project_admin"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("projects.project_id"), nullable=False, index=True
    )
    admin_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)


class ProjectApiKeyModel(Base, TimestampMixin):
    __tablename__ = "project_api_keys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("projects.project_id"), nullable=False, index=True
    )
    api_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    creator_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
