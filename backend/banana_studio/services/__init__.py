from banana_studio.services.generation_service import run_generation
from banana_studio.services.output_normalizer import normalize_output
from banana_studio.services.provider import (
    ImageAttachment,
    ImageProvider,
    ReplicateProvider,
    get_image_provider,
)

__all__ = [
    "run_generation",
    "normalize_output",
    "ImageAttachment",
    "ImageProvider",
    "ReplicateProvider",
    "get_image_provider",
]
