"""
In-process preview store: hands out revocable `blob:` references to image bytes,
the same way a browser's object URLs work for on-screen previews.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BLOB_SCHEME = "blob:"


@dataclass(frozen=True)
class PreviewEntry:
    content: bytes
    content_type: str


class PreviewStore:
    def __init__(self) -> None:
        self._entries: dict[str, PreviewEntry] = {}

    @staticmethod
    def is_local(ref: str | None) -> bool:
        """True for references this kind of store allocates (as opposed to static asset paths)."""
        return bool(ref) and ref.startswith(BLOB_SCHEME)

    @property
    def live_count(self) -> int:
        return len(self._entries)

    def create(self, content: bytes, content_type: str | None = None) -> str:
        ref = f"{BLOB_SCHEME}{uuid.uuid4()}"
        self._entries[ref] = PreviewEntry(content, content_type or "application/octet-stream")
        return ref

    def get(self, ref: str) -> PreviewEntry | None:
        return self._entries.get(ref)

    def revoke(self, ref: str) -> bool:
        """Release a reference. Returns False if it was unknown or already revoked."""
        if self._entries.pop(ref, None) is None:
            logger.debug("revoke of unknown preview %s", ref)
            return False
        return True
