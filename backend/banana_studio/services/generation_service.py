"""
Generation request handling: validate, call the provider once, normalize its output.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

from banana_studio.core.config import get_settings
from banana_studio.core.errors import (
    EmptyResultError,
    ProviderInvocationError,
    StudioError,
    ValidationError,
)
from banana_studio.services.output_normalizer import normalize_output
from banana_studio.services.provider import ImageAttachment, ImageProvider

logger = logging.getLogger(__name__)


def validate_prompt(prompt: str | None) -> str:
    """Return the prompt as submitted. Raise ValidationError if missing, blank or too long."""
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("Prompt is required")
    max_length = get_settings().prompt_max_length
    if len(prompt) > max_length:
        raise ValidationError(f"Prompt is too long. Max {max_length} characters")
    return prompt


def select_attachments(images: Sequence[ImageAttachment]) -> list[ImageAttachment]:
    """Drop empty file parts; reject oversized ones."""
    settings = get_settings()
    selected = []
    for image in images:
        if image.size == 0:
            continue
        if image.size > settings.upload_max_bytes:
            raise ValidationError(
                f"File too large: {image.filename}. Max {settings.upload_max_size_mb}MB"
            )
        selected.append(image)
    return selected


def build_provider_input(prompt: str, images: Sequence[ImageAttachment]) -> dict[str, Any]:
    provider_input: dict[str, Any] = {"prompt": prompt}
    if images:
        provider_input["image_input"] = list(images)
    return provider_input


async def run_generation(
    prompt: str | None,
    images: Sequence[ImageAttachment],
    provider: ImageProvider,
) -> list[str]:
    """
    Validate input, invoke the provider exactly once and return the flat URL list.
    Raises ValidationError (400), EmptyResultError (502) or ProviderError (500).
    """
    prompt = validate_prompt(prompt)
    attachments = select_attachments(images)
    provider_input = build_provider_input(prompt, attachments)

    start = time.perf_counter()
    try:
        output = await provider.generate(provider_input)
        image_urls = await normalize_output(output)
    except StudioError:
        raise
    except Exception as e:
        logger.exception("Provider call failed: %s", e)
        raise ProviderInvocationError(str(e) or "Failed to generate image.") from e

    logger.info(
        "generation images_in=%d urls_out=%d %.2fs",
        len(attachments),
        len(image_urls),
        time.perf_counter() - start,
    )
    if not image_urls:
        raise EmptyResultError("No images were returned by the model.")
    return image_urls
