"""Main FastAPI application for the TaskMaster API."""
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from taskmaster import __version__
from taskmaster.config import Settings, get_settings
from taskmaster.db.config import engine_from_settings
from taskmaster.db.init import init_db
from taskmaster.errors import TaskMasterError
from taskmaster.middleware.cors import add_cors_middleware
from taskmaster.routers import auth_router, tasks_router
from taskmaster.services.security import hasher_from_settings, token_service_from_settings
from taskmaster.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto status codes with a short message and no internals."""

    @app.exception_handler(TaskMasterError)
    async def taskmaster_error_handler(request: Request, exc: TaskMasterError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _validation_message(exc), "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Fails with ConfigurationError when settings are incomplete."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="TaskMaster API",
        description="Multi-user task tracking REST API",
        version=__version__,
    )

    app.state.settings = settings
    app.state.engine = engine_from_settings(settings)
    app.state.hasher = hasher_from_settings(settings)
    app.state.tokens = token_service_from_settings(settings)

    add_cors_middleware(app, settings)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize database tables on startup."""
        init_db(app.state.engine)
        logger.info("Application startup complete (environment=%s)", settings.environment)

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.engine.dispose()

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "TaskMaster API is running!"}

    app.include_router(auth_router, prefix="/api/auth")  # /api/auth/register, /api/auth/login
    app.include_router(tasks_router, prefix="/api")  # /api/tasks, /api/tasks/{task_id}

    # Mounted last so API routes take precedence over files with the same path
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskmaster.main:app",
        host="0.0.0.0",
        port=get_settings().port,
    )
