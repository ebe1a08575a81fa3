"""Failure categories raised by the upload pipeline."""

from __future__ import annotations

from collections.abc import Sequence


class UploadError(Exception):
    """Base class for pipeline failures that map to a fixed HTTP status."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.message = message


class UnauthenticatedError(UploadError):
    """Raised when the caller could not be identified."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class MissingConfigurationError(UploadError):
    """Raised when required Cloudinary credentials are absent."""

    def __init__(self, missing: Sequence[str]) -> None:
        super().__init__("Cloudinary configuration is missing")
        self.missing = tuple(missing)


class MissingFileError(UploadError):
    """Raised when the multipart body carries no usable ``file`` part."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("No file provided")


class UpstreamIngestionError(UploadError):
    """Raised when the ingestion service reports a failure or a malformed result."""


class PersistenceError(UploadError):
    """Raised when the video record could not be written."""


__all__ = [
    "MissingConfigurationError",
    "MissingFileError",
    "PersistenceError",
    "UnauthenticatedError",
    "UploadError",
    "UpstreamIngestionError",
]
