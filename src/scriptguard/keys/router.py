"""License key management API router."""

from fastapi import APIRouter, Depends, HTTPException

from scriptguard.common.exceptions import ScriptguardError
from scriptguard.common.security import Principal, require_principal
from scriptguard.keys.schemas import KeyCreate, KeyResponse, NoteUpdate

router = APIRouter(prefix="/projects/{project_id}/keys")


def _get_service():
    from scriptguard.deps import get_key_service
    return get_key_service()


def _get_projects():
    from scriptguard.deps import get_project_service
    return get_project_service()


def _get_db():
    from scriptguard.deps import get_db
    return get_db()


@router.get("", response_model=list[KeyResponse])
async def list_keys(project_id: str, principal: Principal = Depends(require_principal)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            keys = await svc.list_keys(session, project_id)
            return [KeyResponse.model_validate(k) for k in keys]
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=KeyResponse, status_code=201)
async def create_key(
    project_id: str,
    body: KeyCreate,
    principal: Principal = Depends(require_principal),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            key = await svc.create_key(session, project_id, **body.model_dump())
            return KeyResponse.model_validate(key)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{key}", status_code=204)
async def delete_key(
    project_id: str, key: str, principal: Principal = Depends(require_principal)
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            await svc.delete_key(session, project_id, key)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{key}/reset", response_model=KeyResponse)
async def reset_key_binding(
    project_id: str, key: str, principal: Principal = Depends(require_principal)
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            key_obj = await svc.reset_binding(session, project_id, key)
            return KeyResponse.model_validate(key_obj)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{key}/note", response_model=KeyResponse)
async def modify_key_note(
    project_id: str,
    key: str,
    body: NoteUpdate,
    principal: Principal = Depends(require_principal),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await _get_projects().validate_permissions(
                session, principal.admin_id, project_id
            )
            key_obj = await svc.modify_note(session, project_id, key, body.note)
            return KeyResponse.model_validate(key_obj)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
