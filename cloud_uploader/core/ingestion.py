"""Bridge between request handlers and the Cloudinary ingestion service.

The Cloudinary SDK call blocks until the remote service has stored (and, for
video, transcoded) the asset. :class:`UploadStream` runs that call on a
worker thread and reports its outcome through a single ``callback(error,
result)``. :class:`IngestionBridge` turns the callback into a one-shot
:class:`asyncio.Future` so the request coroutine suspends exactly once,
waiting for the first settlement.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Any

import cloudinary.uploader

from cloud_uploader.core.config import Settings
from cloud_uploader.core.errors import UpstreamIngestionError

logger = logging.getLogger(__name__)

IMAGE_FOLDER = "next-cloudinary-uploader"
VIDEO_FOLDER = "video-uploads"
VIDEO_TRANSFORMATION = {"quality": "auto", "fetch_format": "mp4"}

Uploader = Callable[..., Mapping[str, Any]]
UploadCallback = Callable[[BaseException | None, Mapping[str, Any] | None], None]


class AssetKind(str, Enum):
    """Kinds of assets accepted by the ingestion service."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class IngestedAsset:
    """The ingestion service's description of a stored asset."""

    public_id: str
    bytes: int
    duration: float = 0

    @classmethod
    def from_result(cls, result: Mapping[str, Any]) -> "IngestedAsset":
        public_id = result.get("public_id")
        if not public_id:
            raise UpstreamIngestionError("Ingestion result is missing public_id")
        return cls(
            public_id=str(public_id),
            bytes=int(result.get("bytes") or 0),
            duration=float(result.get("duration") or 0),
        )


def upload_options(kind: AssetKind) -> dict[str, Any]:
    """Return the destination options used for an asset kind."""

    if kind is AssetKind.VIDEO:
        return {
            "resource_type": "video",
            "folder": VIDEO_FOLDER,
            "transformation": dict(VIDEO_TRANSFORMATION),
        }
    return {"folder": IMAGE_FOLDER}


class UploadStream:
    """A write-once channel feeding a single upload call.

    Bytes written to the stream are buffered until :meth:`end` closes it, at
    which point the upload starts on the loop's default executor. The
    callback fires exactly once with either the raised error or the result.
    """

    def __init__(
        self,
        uploader: Uploader,
        options: Mapping[str, Any],
        callback: UploadCallback,
        *,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._uploader = uploader
        self._options = dict(options)
        self._callback = callback
        self._loop = loop
        self._buffer = BytesIO()
        self._closed = False
        self._fired = False
        self._pending: asyncio.Future[None] | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, chunk: bytes) -> None:
        if self._closed:
            raise ValueError("write to a closed upload stream")
        self._buffer.write(chunk)

    def end(self, chunk: bytes | None = None) -> None:
        """Write an optional final chunk, close the stream and start the upload."""

        if chunk:
            self.write(chunk)
        if self._closed:
            raise ValueError("upload stream already ended")
        self._closed = True
        self._buffer.seek(0)
        self._pending = self._loop.run_in_executor(None, self._run)
        self._pending.add_done_callback(self._collect)

    def _run(self) -> None:
        try:
            result = self._uploader(self._buffer, **self._options)
        except Exception as exc:
            self._fire(exc, None)
        else:
            self._fire(None, result)
        finally:
            self._buffer.close()

    def _fire(self, error: BaseException | None, result: Mapping[str, Any] | None) -> None:
        self._fired = True
        self._callback(error, result)

    def _collect(self, pending: asyncio.Future[None]) -> None:
        # The worker only escapes _run with errors _run itself does not report.
        if pending.cancelled():
            error: BaseException | None = asyncio.CancelledError()
        else:
            error = pending.exception()
        if error is None:
            return
        if self._fired:
            logger.error("Upload stream worker failed after reporting", exc_info=error)
            return
        self._fire(error, None)


class IngestionBridge:
    """Send buffered payloads to Cloudinary and await the single outcome."""

    def __init__(self, credentials: Mapping[str, str], uploader: Uploader | None = None) -> None:
        self._credentials = dict(credentials)
        self._uploader = uploader or cloudinary.uploader.upload

    @classmethod
    def from_settings(cls, settings: Settings, uploader: Uploader | None = None) -> "IngestionBridge":
        """Build a bridge, raising ``MissingConfigurationError`` on absent credentials."""
        return cls(settings.cloudinary_credentials(), uploader=uploader)

    def open_stream(self, kind: AssetKind, callback: UploadCallback) -> UploadStream:
        options = {**upload_options(kind), **self._credentials}
        return UploadStream(self._uploader, options, callback, loop=asyncio.get_running_loop())

    async def ingest(self, payload: bytes, kind: AssetKind) -> IngestedAsset:
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[Mapping[str, Any]] = loop.create_future()

        def settle(error: BaseException | None, result: Mapping[str, Any] | None) -> None:
            if outcome.done():
                return
            if error is not None:
                failure = UpstreamIngestionError(f"{kind.value} ingestion failed")
                failure.__cause__ = error
                outcome.set_exception(failure)
            elif result is None:
                outcome.set_exception(UpstreamIngestionError("Ingestion returned no result"))
            else:
                outcome.set_result(result)

        def on_complete(error: BaseException | None, result: Mapping[str, Any] | None) -> None:
            loop.call_soon_threadsafe(settle, error, result)

        logger.info("Uploading %s asset (%d bytes)", kind.value, len(payload))
        stream = self.open_stream(kind, on_complete)
        stream.end(payload)

        result = await outcome
        asset = IngestedAsset.from_result(result)
        logger.info("Ingested %s asset %s", kind.value, asset.public_id)
        return asset


__all__ = [
    "AssetKind",
    "IMAGE_FOLDER",
    "IngestedAsset",
    "IngestionBridge",
    "UploadStream",
    "VIDEO_FOLDER",
    "upload_options",
]
