"""File upload endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from cloud_uploader.api import responses
from cloud_uploader.core.errors import UnauthenticatedError
from cloud_uploader.core.identity import IdentityGate
from cloud_uploader.core.ingestion import AssetKind, IngestionBridge
from cloud_uploader.core.payload import VIDEO_FIELDS, extract_upload
from cloud_uploader.core.records import RecordWriter
from cloud_uploader.models.videos import serialize_video

router = APIRouter(prefix="/api")


def get_caller_identity(request: Request) -> str | None:
    """Resolve the caller from request credentials without reading the body."""
    gate: IdentityGate = request.app.state.identity_gate
    return gate.check(request)


def get_ingestion_bridge(request: Request) -> IngestionBridge | None:
    """Return the bridge built at startup, or ``None`` when unconfigured."""
    return getattr(request.app.state, "ingestion_bridge", None)


def get_record_writer(request: Request) -> RecordWriter:
    return request.app.state.record_writer


@router.post("/image-upload")
async def upload_image(
    request: Request,
    caller: str | None = Depends(get_caller_identity),
    bridge: IngestionBridge | None = Depends(get_ingestion_bridge),
) -> JSONResponse:
    """Store an image with the ingestion service and return its public id."""
    if caller is None:
        return responses.failure(UnauthenticatedError(), AssetKind.IMAGE)
    if bridge is None:
        return responses.missing_configuration()

    try:
        upload = await extract_upload(request)
        asset = await bridge.ingest(upload.content, AssetKind.IMAGE)
    except Exception as exc:
        return responses.failure(exc, AssetKind.IMAGE)
    return responses.image_uploaded(asset.public_id)


@router.post("/video-upload")
async def upload_video(
    request: Request,
    caller: str | None = Depends(get_caller_identity),
    bridge: IngestionBridge | None = Depends(get_ingestion_bridge),
    writer: RecordWriter = Depends(get_record_writer),
) -> JSONResponse:
    """Transcode a video with the ingestion service and record its metadata."""
    if caller is None:
        return responses.failure(UnauthenticatedError(), AssetKind.VIDEO)
    if bridge is None:
        return responses.missing_configuration()

    try:
        upload = await extract_upload(request, VIDEO_FIELDS)
        asset = await bridge.ingest(upload.content, AssetKind.VIDEO)
        video = await run_in_threadpool(writer.persist, asset, upload.fields)
    except Exception as exc:
        return responses.failure(exc, AssetKind.VIDEO)
    return responses.video_uploaded(serialize_video(video))
