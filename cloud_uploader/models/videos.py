"""SQLModel declaration for uploaded videos."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field

from .base import BaseModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Video(BaseModel, table=True):
    """Represents a video that finished ingestion and transcoding."""

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        primary_key=True,
        max_length=36,
    )
    title: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    public_id: str = Field(max_length=255, unique=True, index=True)
    original_size: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    compressed_size: str = Field(max_length=64)
    duration: float = Field(default=0, sa_column_kwargs={"nullable": False})
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


def serialize_video(video: Video) -> dict[str, str | float | None]:
    """Render a video row with the camelCase keys clients expect."""

    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "publicId": video.public_id,
        "originalSize": video.original_size,
        "compressedSize": video.compressed_size,
        "duration": video.duration,
        "createdAt": video.created_at.isoformat() if video.created_at else None,
        "updatedAt": video.updated_at.isoformat() if video.updated_at else None,
    }
