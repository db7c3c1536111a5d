"""Execution analytics — append-only log of served scripts."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scriptguard.executions.models import ExecutionModel


class ExecutionService:

    async def record_execution(
        self,
        session: AsyncSession,
        project_id: str,
        owner_identity: str | None = None,
        execution_type: str = "unknown",
    ) -> ExecutionModel:
        execution = ExecutionModel(
            project_id=project_id,
            owner_identity=owner_identity,
            execution_type=execution_type,
        )
        session.add(execution)
        await session.flush()
        return execution

    async def count_executions(self, session: AsyncSession, project_id: str) -> int:
        result = await session.execute(
            select(func.count(ExecutionModel.id)).where(
                ExecutionModel.project_id == project_id
            )
        )
        return result.scalar() or 0

    async def list_executions(
        self,
        session: AsyncSession,
        project_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ExecutionModel]:
        """Paginated execution list, newest first."""
        result = await session.execute(
            select(ExecutionModel)
            .where(ExecutionModel.project_id == project_id)
            .order_by(ExecutionModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())
