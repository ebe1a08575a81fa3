"""Multipart payload extraction for upload requests."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from fastapi import Request
from starlette.datastructures import UploadFile

from cloud_uploader.core.errors import MissingFileError

FILE_FIELD = "file"
VIDEO_FIELDS = ("title", "description", "originalSize")


@dataclass
class UploadPayload:
    """The uploaded bytes plus any sibling text fields sent with them."""

    content: bytes
    filename: str | None = None
    content_type: str | None = None
    fields: dict[str, str | None] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.content)


async def extract_upload(request: Request, fields: Iterable[str] = ()) -> UploadPayload:
    """Read the whole ``file`` part of a multipart body into memory.

    Sibling ``fields`` are returned verbatim when sent as plain text and as
    ``None`` otherwise. Raises :class:`MissingFileError` when there is no
    non-empty file part.
    """

    form = await request.form()
    try:
        upload = form.get(FILE_FIELD)
        if not isinstance(upload, UploadFile):
            raise MissingFileError()

        content = await upload.read()
        if not content:
            raise MissingFileError()

        extras: dict[str, str | None] = {}
        for name in fields:
            value = form.get(name)
            extras[name] = value if isinstance(value, str) else None

        return UploadPayload(
            content=content,
            filename=upload.filename,
            content_type=upload.content_type,
            fields=extras,
        )
    finally:
        await form.close()


__all__ = ["FILE_FIELD", "UploadPayload", "VIDEO_FIELDS", "extract_upload"]
