from banana_studio.models.example_gallery import EXAMPLE_GALLERY

__all__ = ["EXAMPLE_GALLERY"]
