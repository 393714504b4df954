"""CORS configuration."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskmaster.config import Settings

logger = logging.getLogger(__name__)


def add_cors_middleware(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware to the FastAPI application."""
    origins = list(settings.cors_origins)
    # Credentialed requests cannot be combined with a wildcard origin
    allow_credentials = "*" not in origins

    logger.info("CORS allowed origins: %s", origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
