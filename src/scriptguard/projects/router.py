"""Project management API router."""

from fastapi import APIRouter, Depends, HTTPException

from scriptguard.common.exceptions import ScriptguardError
from scriptguard.common.security import Principal, require_principal
from scriptguard.projects.models import ProjectModel
from scriptguard.projects.schemas import (
    ApiKeyCreate,
    ApiKeyResponse,
    ProjectAdminCreate,
    ProjectAdminResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)

router = APIRouter()


def _get_service():
    from scriptguard.deps import get_project_service
    return get_project_service()


def _get_db():
    from scriptguard.deps import get_db
    return get_db()


def _to_response(p: ProjectModel) -> ProjectResponse:
    return ProjectResponse(
        project_id=p.project_id,
        name=p.name,
        description=p.description,
        author_id=p.author_id,
        license_mode=p.license_mode,
        github_owner=p.github_owner,
        github_repo=p.github_repo,
        github_path=p.github_path,
        has_github_token=bool(p.github_token),
        paywall_key_minutes=p.paywall_key_minutes,
        companion_link=p.companion_link,
        created_at=p.created_at,
    )


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def create_project(
    body: ProjectCreate, principal: Principal = Depends(require_principal)
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            project = await svc.create_project(
                session, principal.admin_id, **body.model_dump()
            )
            return _to_response(project)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/projects", response_model=list[ProjectResponse])
async def list_projects(principal: Principal = Depends(require_principal)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            projects = await svc.list_projects_by_author(session, principal.admin_id)
            return [_to_response(p) for p in projects]
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, principal: Principal = Depends(require_principal)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            project = await svc.validate_permissions(
                session, principal.admin_id, project_id
            )
            return _to_response(project)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    principal: Principal = Depends(require_principal),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            project = await svc.update_project(
                session, principal.admin_id, project_id,
                **body.model_dump(exclude_unset=True),
            )
            return _to_response(project)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/projects/{project_id}", status_code=204)
async def delete_project(project_id: str, principal: Principal = Depends(require_principal)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await svc.delete_project(session, principal.admin_id, project_id)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/projects/{project_id}/admins",
    response_model=ProjectAdminResponse,
    status_code=201,
)
async def add_project_admin(
    project_id: str,
    body: ProjectAdminCreate,
    principal: Principal = Depends(require_principal),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            grant = await svc.add_project_admin(
                session, principal.admin_id, project_id, body.admin_id
            )
            return ProjectAdminResponse(
                project_id=grant.project_id, admin_id=grant.admin_id
            )
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/projects/{project_id}/api-keys",
    response_model=ApiKeyResponse,
    status_code=201,
)
async def create_api_key(
    project_id: str,
    body: ApiKeyCreate,
    principal: Principal = Depends(require_principal),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            api_key = await svc.create_api_key(
                session, principal.admin_id, project_id, body.name
            )
            return ApiKeyResponse(
                project_id=api_key.project_id,
                api_key=api_key.api_key,
                name=api_key.name,
                creator_id=api_key.creator_id,
                created_at=api_key.created_at,
            )
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
