"""Admin account service."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scriptguard.accounts.models import AdminModel
from scriptguard.projects.models import ProjectAdminModel, ProjectModel
from scriptguard.projects.service import ProjectService


class AccountService:
    """Admin registration and account removal."""

    def __init__(self, projects: ProjectService):
        self.projects = projects

    async def register_admin(
        self, session: AsyncSession, admin_id: str, name: str, email: str
    ) -> AdminModel:
        """Create the admin, or refresh name and email if it already exists."""
        admin = await session.get(AdminModel, admin_id)
        if admin is None:
            admin = AdminModel(admin_id=admin_id, name=name, email=email)
            session.add(admin)
        else:
            admin.name = name
            admin.email = email
        await session.flush()
        return admin

    async def get_admin(
        self, session: AsyncSession, admin_id: str
    ) -> AdminModel | None:
        return await session.get(AdminModel, admin_id)

    async def delete_account(self, session: AsyncSession, admin_id: str) -> int:
        """Remove the admin, its grants and every project it authored.

        Returns the number of projects deleted.
        """
        admin = await self.projects.validate_admin_account(session, admin_id)

        result = await session.execute(
            select(ProjectModel.project_id).where(ProjectModel.author_id == admin_id)
        )
        project_ids = list(result.scalars().all())
        for project_id in project_ids:
            await self.projects.purge_project(session, project_id)

        await session.execute(
            delete(ProjectAdminModel).where(ProjectAdminModel.admin_id == admin_id)
        )
        await session.delete(admin)
        await session.flush()
        return len(project_ids)
