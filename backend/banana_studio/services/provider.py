"""
Hosted image-generation provider (Replicate HTTP API).

The rest of the app only sees `ImageProvider.generate(provider_input) -> raw output`;
the raw output is opaque and goes straight to the output normalizer.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from banana_studio.core.config import Settings, get_settings
from banana_studio.core.errors import ConfigurationError, ProviderInvocationError

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})


@dataclass(frozen=True)
class ImageAttachment:
    """One uploaded reference image."""

    filename: str
    content_type: str | None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def to_data_uri(self) -> str:
        mime = self.content_type or "application/octet-stream"
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{mime};base64,{encoded}"


class ImageProvider(Protocol):
    async def generate(self, provider_input: dict[str, Any]) -> Any: ...


class ReplicateProvider:
    """
    Runs one prediction per call: submit with `Prefer: wait`, then follow the
    prediction's `get` URL until it reaches a terminal status. No retries.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._settings.replicate_model

    def _get_client(self) -> httpx.AsyncClient:
        token = self._settings.replicate_api_token.strip()
        if not token:
            raise ConfigurationError("REPLICATE_API_TOKEN is not configured")
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._settings.replicate_api_base.rstrip("/"),
                headers={"Authorization": f"Bearer {token}"},
                timeout=httpx.Timeout(None),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _prediction_request(self, provider_input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        encoded_input = dict(provider_input)
        if "image_input" in encoded_input:
            encoded_input["image_input"] = [
                item.to_data_uri() if isinstance(item, ImageAttachment) else item
                for item in encoded_input["image_input"]
            ]
        model, _, version = self.model.partition(":")
        if version:
            return "/predictions", {"version": version, "input": encoded_input}
        return f"/models/{model}/predictions", {"input": encoded_input}

    @staticmethod
    def _read_prediction(response: httpx.Response) -> dict[str, Any]:
        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            detail = (payload.get("detail") if isinstance(payload, dict) else None) or response.text
            raise ProviderInvocationError(
                f"Replicate request failed with status {response.status_code}: {detail}"
            )
        try:
            prediction = response.json()
        except ValueError as e:
            raise ProviderInvocationError(f"Replicate returned invalid JSON: {e}") from e
        if not isinstance(prediction, dict):
            raise ProviderInvocationError("Replicate returned an unexpected prediction payload")
        return prediction

    async def generate(self, provider_input: dict[str, Any]) -> Any:
        client = self._get_client()
        path, body = self._prediction_request(provider_input)
        start = time.perf_counter()
        try:
            response = await client.post(path, json=body, headers={"Prefer": "wait"})
            prediction = self._read_prediction(response)
            while prediction.get("status") not in TERMINAL_STATUSES:
                get_url = (prediction.get("urls") or {}).get("get")
                if not get_url:
                    raise ProviderInvocationError("Replicate prediction has no status URL")
                await asyncio.sleep(self._settings.replicate_poll_interval_seconds)
                prediction = self._read_prediction(await client.get(get_url))
        except httpx.HTTPError as e:
            raise ProviderInvocationError(f"Replicate request failed: {e}") from e

        status = prediction.get("status")
        logger.info(
            "prediction id=%s model=%s status=%s %.2fs",
            prediction.get("id"),
            self.model,
            status,
            time.perf_counter() - start,
        )
        if status == "failed":
            raise ProviderInvocationError(str(prediction.get("error") or "Prediction failed"))
        if status == "canceled":
            raise ProviderInvocationError("Prediction was canceled")
        return prediction.get("output")


# Singleton provider instance; closed from the app lifespan.
_provider: ReplicateProvider | None = None


def get_image_provider() -> ImageProvider:
    global _provider
    if _provider is None:
        _provider = ReplicateProvider()
    return _provider


async def close_image_provider() -> None:
    global _provider
    if _provider is not None:
        await _provider.close()
        _provider = None
