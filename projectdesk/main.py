import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.config import Settings, get_settings
from .core.errors import register_exception_handlers
from .core.logging import configure_logging
from .db.mongodb import DataBase, close_mongo_connection, connect_to_mongo
from .routers import projects, users

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: DataBase | None = None) -> FastAPI:
    """
    Builds the API. When `database` is given the app uses it as-is and does not
    open or close a Mongo connection of its own.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up...")
        owns_connection = app.state.database is None
        if owns_connection:
            app.state.database = await connect_to_mongo(settings)
        yield
        logger.info("Shutting down...")
        if owns_connection:
            await close_mongo_connection(app.state.database)
            app.state.database = None

    app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    register_exception_handlers(app)

    app.include_router(projects.router, prefix=f"{settings.API_PREFIX}/projects", tags=["Projects"])
    app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["Users"])

    @app.get("/")
    async def root():
        """Root endpoint providing basic info."""
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    return app


app = create_app()
