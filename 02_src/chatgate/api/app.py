"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..app import Application
from .routes import observability


def create_fastapi_app(application: Application | None = None, manage_lifecycle: bool = True) -> FastAPI:
    """Create the FastAPI app; its lifespan starts and stops the gateway."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        if manage_lifecycle:
            await application.start()
        yield
        if manage_lifecycle:
            await application.stop()

    fastapi_app = FastAPI(
        title="Chat Gateway API",
        description="Observability API for the group-chat assistant gateway",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    fastapi_app.include_router(observability.create_observability_router(application))

    return fastapi_app
