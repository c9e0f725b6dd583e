"""
Request/response schemas for the generation API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_urls: list[str] = Field(..., alias="imageUrls", min_length=1)


class ErrorResponse(BaseModel):
    error: str


class ExampleItem(BaseModel):
    image: str
    title: str
    description: str
    prompt: str
