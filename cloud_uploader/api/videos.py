"""Read-only endpoints for stored video records."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from cloud_uploader.core.db import get_session
from cloud_uploader.models.videos import Video, serialize_video

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/videos")
def list_videos(session: Session = Depends(get_session)) -> JSONResponse:
    """Return every stored video, newest first."""
    try:
        videos = session.exec(select(Video).order_by(Video.created_at.desc())).all()
    except SQLAlchemyError:
        logger.exception("Error fetching videos")
        return JSONResponse(
            {"error": "Error fetching videos"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse([serialize_video(video) for video in videos])
