"""Script delivery endpoint.

Always answers ``200 text/plain`` with a Luau chunk: executors run whatever
comes back, so failures are expressed as kick scripts rather than HTTP errors.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from scriptguard.assets.fetcher import FetchErr
from scriptguard.common.config import get_settings
from scriptguard.common.logging import get_logger
from scriptguard.gate.fingerprint import extract_fingerprint

logger = get_logger("gate.router")

router = APIRouter()


def _get_db():
    from scriptguard.deps import get_db
    return get_db()


def _get_gate():
    from scriptguard.deps import get_validation_gate
    return get_validation_gate()


def _get_composer():
    from scriptguard.deps import get_script_composer
    return get_script_composer()


def _get_fetcher():
    from scriptguard.deps import get_asset_fetcher
    return get_asset_fetcher()


def _get_projects():
    from scriptguard.deps import get_project_service
    return get_project_service()


async def _collect_analytics(project_id: str, owner_identity: str | None) -> None:
    """Append an execution record; never lets analytics break delivery."""
    from scriptguard.deps import get_execution_service

    try:
        async with _get_db().get_session() as session:
            await get_execution_service().record_execution(
                session, project_id, owner_identity=owner_identity
            )
    except Exception:
        logger.exception("Failed to record execution", extra={"project_id": project_id})


@router.get("/script", response_class=PlainTextResponse)
async def get_script(request: Request):
    settings = get_settings()
    composer = _get_composer()
    fingerprint = extract_fingerprint(request.headers)
    presented_key = request.headers.get(settings.key_header)

    async with _get_db().get_session() as session:
        project = await _get_projects().resolve_active_project(
            session, settings.active_project_id
        )
        if project is None:
            return PlainTextResponse(composer.compose_unconfigured())
        # Keep the project readable even if the bind rolls the session back
        session.expunge(project)
        decision = await _get_gate().evaluate(
            session, project, fingerprint, presented_key
        )

    if not decision.granted:
        return PlainTextResponse(composer.compose(project, decision))

    if decision.identity_claims.premium:
        await _collect_analytics(
            project.project_id, decision.identity_claims.owner_identity
        )

    asset = await _get_fetcher().fetch(
        project.github_owner,
        project.github_repo,
        project.github_path,
        token=project.github_token,
    )
    if isinstance(asset, FetchErr):
        logger.warning(
            "Asset fetch failed: %s %s", asset.kind.value, asset.detail,
            extra={"project_id": project.project_id},
        )
    return PlainTextResponse(composer.compose(project, decision, asset))
