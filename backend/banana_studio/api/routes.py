"""
Image generation API routes.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request

from banana_studio.core.errors import StudioError
from banana_studio.models.example_gallery import EXAMPLE_GALLERY
from banana_studio.schemas.generation_schema import ErrorResponse, ExampleItem, GenerateResponse
from banana_studio.services.generation_service import run_generation
from banana_studio.services.provider import ImageProvider, get_image_provider
from banana_studio.utils.file_handler import read_attachments

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate(
    request: Request,
    provider: Annotated[ImageProvider, Depends(get_image_provider)],
    prompt: Annotated[str | None, Form(description="Text prompt")] = None,
) -> GenerateResponse:
    """
    Run the hosted model once with the prompt (and reference images, if any).
    Reference images are the repeated `images` form parts; parts that are not
    files are ignored.
    Errors are raised as StudioError and rendered by the app's exception handlers.
    """
    try:
        form = await request.form()
        attachments = await read_attachments(form.getlist("images"))
        image_urls = await run_generation(prompt, attachments, provider)
    except StudioError:
        raise
    except Exception as e:
        logger.exception("[generate] %s", e)
        raise StudioError(str(e) or "Failed to generate image.") from e
    return GenerateResponse(image_urls=image_urls)


@router.get("/examples", response_model=list[ExampleItem])
async def list_examples() -> list[dict[str, str]]:
    """Return the inspiration gallery."""
    return EXAMPLE_GALLERY
