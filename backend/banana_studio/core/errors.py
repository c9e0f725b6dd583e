"""
Error taxonomy shared by the API boundary and the session client.

Every server-side error carries the HTTP status it is reported with; the
exception handlers in `banana_studio.main` turn them into `{"error": message}`.
"""

from __future__ import annotations


class StudioError(Exception):
    """Base class. `message` is what ends up in the JSON error body."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(StudioError):
    """Bad client input (missing/blank prompt, oversized upload)."""

    status_code = 400


class EmptyResultError(StudioError):
    """Provider call succeeded but no image URL could be extracted."""

    status_code = 502


class ProviderError(StudioError):
    """Generic provider-side failure."""

    status_code = 500


class ConfigurationError(ProviderError):
    """Provider credential is missing."""


class ProviderInvocationError(ProviderError):
    """Network or provider-side failure while running the model."""


class DownloadError(StudioError):
    """Client-side failure fetching a result image for saving."""
