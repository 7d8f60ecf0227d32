"""FastAPI application for portrait editing."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .accounts import AccountService, UserRepository
from .config import settings
from .db import SqliteUserRepository
from .editing import EditorRegistry
from .editing.base import BaseImageEditor
from .schemas import HealthResponse
from .workspace import WorkspaceRegistry

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Unknown backend names fail here, before any storage is touched
    if app.state.editor is None:
        app.state.editor = EditorRegistry.get_editor()
    logger.info(f"Using image editor: {app.state.editor.name}")

    repository = app.state.repository
    if isinstance(repository, SqliteUserRepository):
        await repository.init_db()

    await app.state.accounts.ensure_admin()
    logger.info("Credential store ready")

    yield

    # Cleanup
    logger.info("Shutting down...")
    app.state.workspaces.close_all()
    EditorRegistry.shutdown()


def create_app(
    repository: UserRepository | None = None,
    editor: BaseImageEditor | None = None,
) -> FastAPI:
    """Build the application with its credential store and editor backend."""
    app = FastAPI(
        title="Portrait Studio API",
        description="ID photo and portrait restoration editing over a generative image API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.repository = repository or SqliteUserRepository()
    app.state.accounts = AccountService(app.state.repository, admin_password=settings.admin_password)
    app.state.workspaces = WorkspaceRegistry()
    app.state.editor = editor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import accounts_router, prompts_router, workspaces_router

    app.include_router(accounts_router)
    app.include_router(prompts_router)
    app.include_router(workspaces_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        editor_name = app.state.editor.name if app.state.editor else settings.editor_backend
        return HealthResponse(
            status="healthy",
            editor=editor_name,
            available_editors=EditorRegistry.get_available_editors(),
        )

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "portrait_studio.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
