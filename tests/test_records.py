"""Tests for the video record writer."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from datetime import timezone

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from cloud_uploader.core.errors import PersistenceError
from cloud_uploader.core.ingestion import IngestedAsset
from cloud_uploader.core.records import RecordWriter, build_video
from cloud_uploader.models.videos import Video


class CountingSessionFactory:
    """Open real sessions while counting acquisitions and releases."""

    def __init__(self, engine: Engine, *, fail_commit: bool = False) -> None:
        self.engine = engine
        self.fail_commit = fail_commit
        self.opened = 0
        self.closed = 0
        self.rollbacks = 0

    @contextmanager
    def __call__(self) -> Iterator[Session]:
        self.opened += 1
        session = Session(self.engine)
        if self.fail_commit:
            session.commit = self._failing_commit
            original_rollback = session.rollback

            def rollback() -> None:
                self.rollbacks += 1
                original_rollback()

            session.rollback = rollback
        try:
            yield session
        finally:
            session.close()
            self.closed += 1

    @staticmethod
    def _failing_commit() -> None:
        raise OperationalError("INSERT INTO video", {}, Exception("database is locked"))


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


def _stored_videos(engine: Engine) -> list[Video]:
    with Session(engine) as session:
        return list(session.exec(select(Video)).all())


def test_build_video_maps_asset_and_fields():
    asset = IngestedAsset(public_id="abc", bytes=500000)

    video = build_video(
        asset,
        {"title": "Demo", "description": "First cut", "originalSize": "1000000"},
    )

    assert video.title == "Demo"
    assert video.description == "First cut"
    assert video.public_id == "abc"
    assert video.original_size == "1000000"
    assert video.compressed_size == "500000"
    assert video.duration == 0


def test_persist_writes_record_and_releases_session(engine: Engine):
    factory = CountingSessionFactory(engine)
    writer = RecordWriter(factory)

    video = writer.persist(
        IngestedAsset(public_id="abc", bytes=500000),
        {"title": "Demo", "description": None, "originalSize": "1000000"},
    )

    assert video.id
    assert video.compressed_size == "500000"
    assert video.duration == 0
    assert factory.opened == factory.closed == 1

    stored = _stored_videos(engine)
    assert [row.public_id for row in stored] == ["abc"]
    assert stored[0].original_size == "1000000"


def test_persist_releases_session_when_insert_fails(engine: Engine):
    factory = CountingSessionFactory(engine, fail_commit=True)
    writer = RecordWriter(factory)

    with pytest.raises(PersistenceError) as excinfo:
        writer.persist(IngestedAsset(public_id="abc", bytes=1), {})

    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert factory.opened == 1
    assert factory.closed == 1
    assert factory.rollbacks == 1
    assert _stored_videos(engine) == []


def test_persist_rejects_duplicate_public_id(engine: Engine):
    factory = CountingSessionFactory(engine)
    writer = RecordWriter(factory)
    asset = IngestedAsset(public_id="dup", bytes=10, duration=3.0)

    writer.persist(asset, {"title": "first"})
    with pytest.raises(PersistenceError):
        writer.persist(asset, {"title": "second"})

    assert factory.opened == factory.closed == 2
    stored = _stored_videos(engine)
    assert len(stored) == 1
    assert stored[0].title == "first"
    assert stored[0].duration == 3.0


def test_build_video_stamps_timezone_aware_times():
    video = build_video(IngestedAsset(public_id="abc", bytes=1), {})

    assert video.created_at.tzinfo is timezone.utc
    assert video.updated_at.tzinfo is timezone.utc


def test_free_text_columns_have_no_length_limit(engine: Engine):
    for name in ("title", "description", "original_size"):
        assert getattr(Video.__table__.c[name].type, "length", None) is None

    long_title = "Holiday " * 500
    writer = RecordWriter(CountingSessionFactory(engine))
    writer.persist(
        IngestedAsset(public_id="long", bytes=1),
        {"title": long_title, "originalSize": "9" * 200},
    )

    stored = _stored_videos(engine)
    assert stored[0].title == long_title
    assert stored[0].original_size == "9" * 200
