"""
Save a generated image to disk.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

import httpx

from banana_studio.core.errors import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "nano-banana.jpg"


def filename_from_url(url: str) -> str:
    """Last non-empty path segment of the URL, or DEFAULT_FILENAME."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return DEFAULT_FILENAME
    segments = [s for s in path.split("/") if s]
    if not segments:
        return DEFAULT_FILENAME
    return PurePosixPath(segments[-1]).name or DEFAULT_FILENAME


async def download_image(client: httpx.AsyncClient, url: str, destination: Path) -> Path:
    """
    Fetch `url` and write it to `destination` (a file path, or a directory to
    place `filename_from_url(url)` in). Raises DownloadError on any failure.
    """
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise DownloadError(f"Download failed: {e}") from e
    if response.is_error:
        raise DownloadError("Download failed. Please try again.")

    target = destination / filename_from_url(url) if destination.is_dir() else destination
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(response.content)
    except OSError as e:
        raise DownloadError(f"Could not save image: {e}") from e
    logger.info("downloaded %s -> %s (%d bytes)", url, target, len(response.content))
    return target
