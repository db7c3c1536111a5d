"""FastAPI application factory for Scriptguard."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scriptguard.common.config import get_settings
from scriptguard.common.logging import setup_logging
from scriptguard.common.schemas import HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from scriptguard.deps import get_asset_fetcher, get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await get_asset_fetcher().close()
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from scriptguard.gate.router import router as gate_router
    from scriptguard.accounts.router import router as accounts_router
    from scriptguard.projects.router import router as projects_router
    from scriptguard.keys.router import router as keys_router
    from scriptguard.executions.router import router as executions_router

    prefix = settings.api_prefix
    app.include_router(gate_router, prefix=prefix, tags=["script"])
    app.include_router(accounts_router, prefix=prefix, tags=["accounts"])
    app.include_router(projects_router, prefix=prefix, tags=["projects"])
    app.include_router(keys_router, prefix=prefix, tags=["keys"])
    app.include_router(executions_router, prefix=prefix, tags=["executions"])

    return app
