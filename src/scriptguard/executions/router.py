"""Execution analytics API router."""

from fastapi import APIRouter, Depends, HTTPException, Query

from scriptguard.common.exceptions import ScriptguardError
from scriptguard.common.security import Principal, require_principal
from scriptguard.executions.schemas import ExecutionCount, ExecutionResponse

router = APIRouter()


def _get_service():
    from scriptguard.deps import get_execution_service
    return get_execution_service()


def _get_projects():
    from scriptguard.deps import get_project_service
    return get_project_service()


def _get_db():
    from scriptguard.deps import get_db
    return get_db()


@router.get("/projects/{project_id}/executions", response_model=list[ExecutionResponse])
async def list_executions(
    project_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(require_principal),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            executions = await svc.list_executions(
                session, project_id, limit=limit, offset=offset
            )
            return [ExecutionResponse.model_validate(e) for e in executions]
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/projects/{project_id}/executions/count", response_model=ExecutionCount)
async def count_executions(
    project_id: str, principal: Principal = Depends(require_principal)
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            count = await svc.count_executions(session, project_id)
            return ExecutionCount(project_id=project_id, count=count)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
