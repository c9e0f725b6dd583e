"""
Generation session: client-side state for one prompt → image round trip at a time.

States and transitions:
    idle / displaying-* --submit--> submitting
    submitting --success--> displaying-result
    submitting --failure--> displaying-error

A submit is ignored (no transition, no request) while one is in flight or when
the prompt is blank. Metadata for a submission is published before the request
is sent; the preview it supersedes is released right after publication.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

import httpx

from banana_studio.client.download import download_image
from banana_studio.client.preview import PreviewStore
from banana_studio.core.config import get_settings
from banana_studio.core.errors import DownloadError, StudioError
from banana_studio.services.provider import ImageAttachment

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
GENERIC_FAILURE = "We couldn't create an image. Please try again."


class SessionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    DISPLAYING_RESULT = "displaying-result"
    DISPLAYING_ERROR = "displaying-error"


@dataclass(frozen=True)
class GenerationMetadata:
    prompt: str
    timestamp: str
    image_preview: str = ""


@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    description: str
    variant: str = "destructive"


MetadataListener = Callable[[GenerationMetadata], None]


def format_timestamp(moment: datetime) -> str:
    """Local date-time as MM/DD/YYYY, HH:MM:SS (24-hour)."""
    return moment.strftime("%m/%d/%Y, %H:%M:%S")


class GenerationSession:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        api_base_url: str = "http://127.0.0.1:7000",
        previews: PreviewStore | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._owns_client = client is None
        # No client-side timeout: a slow provider call holds the session until it settles.
        self._client = client or httpx.AsyncClient(base_url=api_base_url, timeout=httpx.Timeout(None))
        self._previews = previews or PreviewStore()
        self._clock = clock
        self._prompt_max_length = get_settings().prompt_max_length

        self._state = SessionState.IDLE
        self._prompt = ""
        self._uploaded_images: list[ImageAttachment] = []
        self._image_urls: list[str] = []
        self._metadata: GenerationMetadata | None = None
        # Preview of the last published metadata; the session owns it until released.
        self._preview_ref: str | None = None
        self._listeners: list[MetadataListener] = []
        self._notifications: list[Notification] = []
        self._notification_ids = itertools.count(1)
        self._downloading = False
        self._closed = False

    # ---------- read-only view ----------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return self._state is SessionState.SUBMITTING

    @property
    def image_urls(self) -> list[str]:
        return list(self._image_urls)

    @property
    def has_results(self) -> bool:
        return bool(self._image_urls)

    @property
    def metadata(self) -> GenerationMetadata | None:
        return self._metadata

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def previews(self) -> PreviewStore:
        return self._previews

    # ---------- draft inputs ----------

    @property
    def prompt(self) -> str:
        return self._prompt

    @prompt.setter
    def prompt(self, value: str) -> None:
        self._prompt = value[: self._prompt_max_length]

    @property
    def uploaded_images(self) -> list[ImageAttachment]:
        return list(self._uploaded_images)

    def add_images(self, *images: ImageAttachment) -> None:
        self._uploaded_images.extend(images)

    def remove_image(self, index: int) -> None:
        del self._uploaded_images[index]

    def use_example(self, prompt: str) -> None:
        self.prompt = prompt

    def subscribe(self, listener: MetadataListener) -> Callable[[], None]:
        """Call `listener` with every published metadata. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dismiss(self, notification_id: int) -> bool:
        for i, notification in enumerate(self._notifications):
            if notification.id == notification_id:
                del self._notifications[i]
                return True
        return False

    # ---------- transitions ----------

    async def submit(
        self,
        prompt: str | None = None,
        images: Sequence[ImageAttachment] | None = None,
    ) -> bool:
        """
        Start a generation. Returns False (and does nothing) if the prompt is blank,
        a submission is already in flight or the session is closed; True once the
        attempt has settled.
        """
        prompt = self._prompt if prompt is None else prompt
        images = list(self._uploaded_images if images is None else images)
        if self._closed:
            logger.debug("submit ignored: session closed")
            return False
        if self._state is SessionState.SUBMITTING:
            logger.debug("submit ignored: request already in flight")
            return False
        if not prompt.strip():
            logger.debug("submit ignored: blank prompt")
            return False

        self._state = SessionState.SUBMITTING
        preview = self._previews.create(images[0].content, images[0].content_type) if images else ""
        self._publish_metadata(
            GenerationMetadata(prompt=prompt, timestamp=format_timestamp(self._clock()), image_preview=preview)
        )

        try:
            image_urls = await self._request_generation(prompt, images)
        except Exception as e:
            message = (e.message if isinstance(e, StudioError) else str(e)) or GENERIC_FAILURE
            logger.error("Generation failed: %s", message)
            self._image_urls = []
            self._notify("Generation failed", message)
            self._state = SessionState.DISPLAYING_ERROR
            return True

        self._image_urls = image_urls
        self._state = SessionState.DISPLAYING_RESULT
        return True

    async def download(self, url: str, destination: Path | str = ".") -> Path | None:
        """Save a result image. Failures become a notification; the state is unchanged."""
        if not url or self._downloading:
            return None
        self._downloading = True
        try:
            return await download_image(self._client, url, Path(destination))
        except DownloadError as e:
            logger.error("Download failed: %s", e.message)
            self._notify("Unable to download", e.message)
            return None
        finally:
            self._downloading = False

    async def aclose(self) -> None:
        """Teardown: release the live preview and close the HTTP client if we created it."""
        if self._closed:
            return
        self._closed = True
        self._release_preview(self._preview_ref)
        self._preview_ref = None
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GenerationSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---------- internals ----------

    def _publish_metadata(self, metadata: GenerationMetadata) -> None:
        previous = self._preview_ref
        self._metadata = metadata
        self._preview_ref = metadata.image_preview or None
        for listener in list(self._listeners):
            try:
                listener(metadata)
            except Exception as e:
                logger.exception("Metadata listener failed: %s", e)
        if previous != self._preview_ref:
            self._release_preview(previous)

    def _release_preview(self, ref: str | None) -> None:
        if ref and self._previews.is_local(ref):
            self._previews.revoke(ref)

    def _notify(self, title: str, description: str) -> Notification:
        notification = Notification(id=next(self._notification_ids), title=title, description=description)
        self._notifications.append(notification)
        return notification

    async def _request_generation(self, prompt: str, images: Sequence[ImageAttachment]) -> list[str]:
        files = [
            ("images", (image.filename, image.content, image.content_type or "application/octet-stream"))
            for image in images
        ]
        response = await self._client.post(GENERATE_PATH, data={"prompt": prompt}, files=files or None)
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            error = payload.get("error") if isinstance(payload, dict) else None
            raise StudioError(error if isinstance(error, str) else "Generation request failed.")

        image_urls = payload.get("imageUrls") if isinstance(payload, dict) else None
        if not isinstance(image_urls, list) or not image_urls:
            raise StudioError("No images were returned by the model.")
        return [str(url) for url in image_urls]
