"""Persistence of video records for completed ingestions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from cloud_uploader.core.db import open_session
from cloud_uploader.core.errors import PersistenceError
from cloud_uploader.core.ingestion import IngestedAsset
from cloud_uploader.models.videos import Video

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


def build_video(asset: IngestedAsset, fields: Mapping[str, str | None]) -> Video:
    """Map an ingested asset and its form fields onto a new ``Video`` row."""

    return Video(
        title=fields.get("title"),
        description=fields.get("description"),
        public_id=asset.public_id,
        original_size=fields.get("originalSize"),
        compressed_size=str(asset.bytes),
        duration=asset.duration or 0,
    )


class RecordWriter:
    """Write exactly one ``Video`` row per successful video ingestion.

    A session is opened right before the insert and closed when the ``with``
    block exits, whether the write succeeded or not.
    """

    def __init__(self, session_factory: SessionFactory = open_session) -> None:
        self._session_factory = session_factory

    def persist(self, asset: IngestedAsset, fields: Mapping[str, str | None]) -> Video:
        video = build_video(asset, fields)
        with self._session_factory() as session:
            try:
                session.add(video)
                session.commit()
                session.refresh(video)
            except SQLAlchemyError as exc:
                session.rollback()
                raise PersistenceError("Unable to store video record") from exc
        logger.info("Stored video %s for asset %s", video.id, asset.public_id)
        return video


__all__ = ["RecordWriter", "build_video"]
