"""Fixed JSON response shapes for the upload endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import status
from fastapi.responses import JSONResponse

from cloud_uploader.core.errors import MissingConfigurationError, UploadError
from cloud_uploader.core.ingestion import AssetKind

logger = logging.getLogger(__name__)

MISSING_CONFIGURATION = "Cloudinary configuration is missing"
IMAGE_UPLOAD_FAILED = "Image upload failed"
VIDEO_UPLOAD_FAILED = "Upload Video failed"

_FAILURE_MESSAGES = {
    AssetKind.IMAGE: IMAGE_UPLOAD_FAILED,
    AssetKind.VIDEO: VIDEO_UPLOAD_FAILED,
}


def error_body(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def missing_configuration() -> JSONResponse:
    return error_body(MISSING_CONFIGURATION, status.HTTP_500_INTERNAL_SERVER_ERROR)


def image_uploaded(public_id: str) -> JSONResponse:
    return JSONResponse({"publicId": public_id}, status_code=status.HTTP_200_OK)


def video_uploaded(video: Mapping[str, object]) -> JSONResponse:
    return JSONResponse({"video": dict(video)}, status_code=status.HTTP_201_CREATED)


def failure(exc: Exception, kind: AssetKind) -> JSONResponse:
    """Log ``exc`` and convert it to the fixed response for its category.

    Upstream and database detail stays in the log; clients only see the
    category message.
    """

    if isinstance(exc, UploadError) and exc.status_code < 500:
        logger.warning("Rejected %s upload: %s", kind.value, exc.message)
        return error_body(exc.message, exc.status_code)
    if isinstance(exc, MissingConfigurationError):
        logger.error("Rejected %s upload: %s", kind.value, exc.message)
        return missing_configuration()

    logger.error("Error uploading %s", kind.value, exc_info=exc)
    return error_body(_FAILURE_MESSAGES[kind], status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = [
    "IMAGE_UPLOAD_FAILED",
    "MISSING_CONFIGURATION",
    "VIDEO_UPLOAD_FAILED",
    "failure",
    "image_uploaded",
    "missing_configuration",
    "video_uploaded",
]
