"""FastAPI application entrypoint for the Cloud Uploader service."""

from __future__ import annotations

import logging
from functools import partial

from fastapi import FastAPI
from sqlmodel import Session

from cloud_uploader.api.uploads import router as uploads_router
from cloud_uploader.api.videos import router as videos_router
from cloud_uploader.core.config import Settings, settings
from cloud_uploader.core.db import build_engine
from cloud_uploader.core.errors import MissingConfigurationError
from cloud_uploader.core.identity import IdentityGate
from cloud_uploader.core.ingestion import IngestionBridge
from cloud_uploader.core.logging import setup_logging
from cloud_uploader.core.records import RecordWriter

logger = logging.getLogger(__name__)


def build_ingestion_bridge(config: Settings) -> IngestionBridge | None:
    """Validate Cloudinary credentials once and build the bridge.

    Returns ``None`` when credentials are missing so the upload endpoints can
    report the configuration error instead of the process failing to boot.
    """

    try:
        return IngestionBridge.from_settings(config)
    except MissingConfigurationError as exc:
        logger.error(
            "Cloudinary configuration is missing: %s", ", ".join(exc.missing)
        )
        return None


def create_app(config: Settings = settings) -> FastAPI:
    setup_logging(config.log_level)

    application = FastAPI(title="Cloud Uploader")
    application.state.identity_gate = IdentityGate(config)
    application.state.ingestion_bridge = build_ingestion_bridge(config)
    application.state.engine = build_engine(config.db_url)
    application.state.record_writer = RecordWriter(partial(Session, application.state.engine))

    application.include_router(uploads_router)
    application.include_router(videos_router)

    @application.get("/health")
    def health() -> dict[str, bool]:
        """Basic liveness probe endpoint."""
        return {"ok": True}

    return application


app = create_app()
