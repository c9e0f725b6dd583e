"""
Upload and local-file helpers shared by the API and the session client.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from starlette.datastructures import UploadFile

from banana_studio.services.provider import ImageAttachment


async def read_attachment(upload: UploadFile) -> ImageAttachment:
    """Read an uploaded form part fully into memory."""
    content = await upload.read()
    return ImageAttachment(
        filename=upload.filename or "upload",
        content_type=upload.content_type,
        content=content,
    )


async def read_attachments(parts: Sequence[Any] | None) -> list[ImageAttachment]:
    """Read every file part; plain-text parts under the same field name are skipped."""
    return [await read_attachment(part) for part in parts or [] if isinstance(part, UploadFile)]


def load_attachment(path: Path) -> ImageAttachment:
    """Build an attachment from a file on disk; content type guessed from the suffix."""
    content_type, _ = mimetypes.guess_type(path.name)
    return ImageAttachment(
        filename=path.name,
        content_type=content_type or "application/octet-stream",
        content=path.read_bytes(),
    )
