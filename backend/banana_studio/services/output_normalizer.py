"""
Flatten whatever the provider returns into a list of image URLs.

Accepted shapes (see OutputShape):
    - a string or URL object                -> [str(value)]
    - an object with a callable `url`       -> [resolved url] or []
    - a list/tuple of any of these          -> in-order concatenation
    - a mapping                             -> its immediate values only
Anything else yields []. normalize_output never raises.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Awaitable, Protocol

import httpx
import pydantic_core
from pydantic import AnyUrl

logger = logging.getLogger(__name__)

URL_TYPES: tuple[type, ...] = (httpx.URL, AnyUrl, pydantic_core.Url)


class UrlAccessor(Protocol):
    """Provider file handle that resolves its own URL (possibly asynchronously)."""

    def url(self) -> Awaitable[Any] | Any: ...


class OutputShape(str, Enum):
    STRING = "string"
    URL = "url"
    ACCESSOR = "accessor"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


def _has_url_accessor(value: Any) -> bool:
    try:
        return callable(getattr(value, "url", None))
    except Exception:
        # Attribute lookup itself blew up (e.g. a raising property).
        return False


def classify_output(value: Any) -> OutputShape:
    """Tag a provider value with the shape normalize_output handles it as. Order matters."""
    if isinstance(value, str):
        return OutputShape.STRING
    if isinstance(value, URL_TYPES):
        return OutputShape.URL
    if _has_url_accessor(value):
        return OutputShape.ACCESSOR
    if isinstance(value, (list, tuple)):
        return OutputShape.SEQUENCE
    if isinstance(value, Mapping):
        return OutputShape.MAPPING
    return OutputShape.OTHER


def _as_string(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, URL_TYPES):
        return str(value)
    return None


async def _resolve_accessor(value: UrlAccessor) -> str | None:
    try:
        resolved = value.url()
        if inspect.isawaitable(resolved):
            resolved = await resolved
    except Exception as e:
        logger.warning("Output URL accessor failed (%s): %s", type(value).__name__, e)
        return None
    return _as_string(resolved)


async def normalize_output(output: Any) -> list[str]:
    shape = classify_output(output)

    if shape is OutputShape.STRING:
        return [output]

    if shape is OutputShape.URL:
        return [str(output)]

    if shape is OutputShape.ACCESSOR:
        url = await _resolve_accessor(output)
        return [url] if url else []

    if shape is OutputShape.SEQUENCE:
        results: list[str] = []
        for item in output:
            results.extend(await normalize_output(item))
        return [url for url in results if url]

    if shape is OutputShape.MAPPING:
        # One level only: nested lists/mappings inside values are not expanded.
        results = []
        for value in output.values():
            if classify_output(value) is OutputShape.ACCESSOR:
                url = await _resolve_accessor(value)
            else:
                url = _as_string(value)
            if url:
                results.append(url)
        return results

    return []
