"""Admin account API router.

Registration and token minting require the super-admin key; the account
endpoints act on the admin behind the session token.
"""

from fastapi import APIRouter, Depends, HTTPException

from scriptguard.common.exceptions import ScriptguardError
from scriptguard.common.security import (
    Principal,
    create_session_token,
    require_principal,
    require_super_admin,
)
from scriptguard.accounts.schemas import (
    AccountDeleteResponse,
    AdminCreate,
    AdminSessionResponse,
)
from scriptguard.projects.schemas import (
    ApiKeyDeleteRequest,
    ApiKeyDeleteResponse,
    ApiKeyResponse,
)

router = APIRouter()


def _get_service():
    from scriptguard.deps import get_account_service
    return get_account_service()


def _get_projects():
    from scriptguard.deps import get_project_service
    return get_project_service()


def _get_db():
    from scriptguard.deps import get_db
    return get_db()


@router.post("/admins", response_model=AdminSessionResponse, status_code=201)
async def register_admin(body: AdminCreate, _=Depends(require_super_admin)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        admin = await svc.register_admin(
            session, body.admin_id, body.name, body.email
        )
        return AdminSessionResponse(
            admin_id=admin.admin_id,
            name=admin.name,
            email=admin.email,
            session_token=create_session_token(admin.admin_id),
        )


@router.post("/admins/{admin_id}/session", response_model=AdminSessionResponse)
async def create_admin_session(admin_id: str, _=Depends(require_super_admin)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        admin = await svc.get_admin(session, admin_id)
        if admin is None:
            raise HTTPException(status_code=404, detail="Admin not found")
        return AdminSessionResponse(
            admin_id=admin.admin_id,
            name=admin.name,
            email=admin.email,
            session_token=create_session_token(admin.admin_id),
        )


@router.delete("/account", response_model=AccountDeleteResponse)
async def delete_account(principal: Principal = Depends(require_principal)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            deleted = await svc.delete_account(session, principal.admin_id)
            return AccountDeleteResponse(
                admin_id=principal.admin_id, projects_deleted=deleted
            )
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/account/api-keys", response_model=list[ApiKeyResponse])
async def list_account_api_keys(principal: Principal = Depends(require_principal)):
    db = _get_db()
    try:
        async with db.get_session() as session:
            keys = await _get_projects().list_api_keys_by_creator(
                session, principal.admin_id
            )
            return [
                ApiKeyResponse(
                    project_id=k.project_id, api_key=k.api_key, name=k.name,
                    creator_id=k.creator_id, created_at=k.created_at,
                )
                for k in keys
            ]
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/account/api-keys/delete", response_model=ApiKeyDeleteResponse)
async def delete_account_api_keys(
    body: ApiKeyDeleteRequest, principal: Principal = Depends(require_principal)
):
    db = _get_db()
    try:
        async with db.get_session() as session:
            deleted = await _get_projects().delete_api_keys(
                session,
                principal.admin_id,
                [(ref.project_id, ref.api_key) for ref in body.keys],
            )
            return ApiKeyDeleteResponse(deleted=deleted)
    except ScriptguardError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
