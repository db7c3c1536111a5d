"""Project registry — CRUD, admin grants, API keys and permission checks."""

from typing import Any

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scriptguard.accounts.models import AdminModel
from scriptguard.common.exceptions import (
    AdminNotFoundError,
    MissingFieldsError,
    ProjectNotFoundError,
    UnauthorizedError,
)
from scriptguard.executions.models import ExecutionModel
from scriptguard.keygen.generator import generate_api_key, generate_project_id
from scriptguard.keys.models import KeyModel
from scriptguard.projects.models import (
    ProjectAdminModel,
    ProjectApiKeyModel,
    ProjectModel,
)

_UPDATABLE_FIELDS = (
    "name", "description", "license_mode",
    "github_owner", "github_repo", "github_path", "github_token",
    "paywall_key_minutes", "companion_link",
)
# Explicit None clears these; other fields ignore None
_CLEARABLE_FIELDS = ("github_token", "companion_link")


class ProjectService:
    """Project management operations."""

    # ── Permissions ──

    async def validate_admin_account(
        self, session: AsyncSession, admin_id: str
    ) -> AdminModel:
        admin = await session.get(AdminModel, admin_id)
        if admin is None:
            raise UnauthorizedError()
        return admin

    async def validate_permissions(
        self, session: AsyncSession, admin_id: str, project_id: str
    ) -> ProjectModel:
        """Admin account + existing project + grant on that project."""
        await self.validate_admin_account(session, admin_id)

        project = await self.get_project(session, project_id)
        if project is None:
            raise ProjectNotFoundError()

        result = await session.execute(
            select(ProjectAdminModel).where(
                and_(
                    ProjectAdminModel.project_id == project_id,
                    ProjectAdminModel.admin_id == admin_id,
                )
            )
        )
        if result.scalar_one_or_none() is None:
            raise UnauthorizedError()
        return project

    # ── Projects ──

    async def create_project(
        self,
        session: AsyncSession,
        admin_id: str,
        name: str,
        github_owner: str,
        github_repo: str,
        github_path: str,
        license_mode: str = "paid",
        **kwargs: Any,
    ) -> ProjectModel:
        """Create a project; its creator becomes the first project admin."""
        await self.validate_admin_account(session, admin_id)

        project = ProjectModel(
            project_id=generate_project_id(),
            name=name,
            description=kwargs.get("description", ""),
            author_id=admin_id,
            license_mode=license_mode,
            github_owner=github_owner,
            github_repo=github_repo,
            github_path=github_path,
            github_token=kwargs.get("github_token") or None,
            paywall_key_minutes=kwargs.get("paywall_key_minutes", 1),
            companion_link=kwargs.get("companion_link") or None,
        )
        session.add(project)
        await session.flush()
        session.add(ProjectAdminModel(project_id=project.project_id, admin_id=admin_id))
        await session.flush()
        return project

    async def get_project(
        self, session: AsyncSession, project_id: str
    ) -> ProjectModel | None:
        return await session.get(ProjectModel, project_id)

    async def resolve_active_project(
        self, session: AsyncSession, project_id: str = ""
    ) -> ProjectModel | None:
        """The project served by this deployment: the configured one, else the oldest."""
        if project_id:
            return await self.get_project(session, project_id)
        result = await session.execute(
            select(ProjectModel).order_by(ProjectModel.created_at.asc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_projects_by_author(
        self, session: AsyncSession, admin_id: str
    ) -> list[ProjectModel]:
        await self.validate_admin_account(session, admin_id)
        result = await session.execute(
            select(ProjectModel).where(ProjectModel.author_id == admin_id)
        )
        return list(result.scalars().all())

    async def update_project(
        self, session: AsyncSession, admin_id: str, project_id: str, **updates: Any
    ) -> ProjectModel:
        project = await self.validate_permissions(session, admin_id, project_id)
        for field in _UPDATABLE_FIELDS:
            if field not in updates:
                continue
            value = updates[field]
            if field in _CLEARABLE_FIELDS:
                setattr(project, field, value or None)
            elif value is not None:
                setattr(project, field, value)
        await session.flush()
        return project

    async def delete_project(
        self, session: AsyncSession, admin_id: str, project_id: str
    ) -> None:
        await self.validate_permissions(session, admin_id, project_id)
        await self.purge_project(session, project_id)

    async def purge_project(self, session: AsyncSession, project_id: str) -> None:
        """Delete a project and every dependent row in the caller's transaction."""
        for model in (ExecutionModel, ProjectApiKeyModel, ProjectAdminModel, KeyModel):
            await session.execute(delete(model).where(model.project_id == project_id))
        await session.execute(
            delete(ProjectModel).where(ProjectModel.project_id == project_id)
        )
        await session.flush()

    # ── Admin grants ──

    async def add_project_admin(
        self, session: AsyncSession, admin_id: str, project_id: str, new_admin_id: str
    ) -> ProjectAdminModel:
        await self.validate_permissions(session, admin_id, project_id)
        if await session.get(AdminModel, new_admin_id) is None:
            raise AdminNotFoundError()

        existing = await session.execute(
            select(ProjectAdminModel).where(
                ProjectAdminModel.project_id == project_id,
                ProjectAdminModel.admin_id == new_admin_id,
            )
        )
        grant = existing.scalar_one_or_none()
        if grant is not None:
            return grant

        grant = ProjectAdminModel(project_id=project_id, admin_id=new_admin_id)
        session.add(grant)
        await session.flush()
        return grant

    # ── API keys ──

    async def create_api_key(
        self, session: AsyncSession, admin_id: str, project_id: str, name: str
    ) -> ProjectApiKeyModel:
        if not name or not project_id:
            raise MissingFieldsError()
        await self.validate_permissions(session, admin_id, project_id)

        api_key = ProjectApiKeyModel(
            project_id=project_id,
            api_key=generate_api_key(),
            name=name,
            creator_id=admin_id,
        )
        session.add(api_key)
        await session.flush()
        return api_key

    async def list_api_keys_by_creator(
        self, session: AsyncSession, admin_id: str
    ) -> list[ProjectApiKeyModel]:
        await self.validate_admin_account(session, admin_id)
        result = await session.execute(
            select(ProjectApiKeyModel).where(ProjectApiKeyModel.creator_id == admin_id)
        )
        return list(result.scalars().all())

    async def delete_api_keys(
        self,
        session: AsyncSession,
        admin_id: str,
        keys: list[tuple[str, str]],
    ) -> int:
        """Delete (project_id, api_key) pairs created by the admin. Returns count."""
        await self.validate_admin_account(session, admin_id)
        deleted = 0
        for project_id, api_key in keys:
            result = await session.execute(
                delete(ProjectApiKeyModel).where(
                    ProjectApiKeyModel.project_id == project_id,
                    ProjectApiKeyModel.api_key == api_key,
                    ProjectApiKeyModel.creator_id == admin_id,
                )
            )
            deleted += result.rowcount or 0
        await session.flush()
        return deleted
