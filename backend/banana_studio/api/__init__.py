from banana_studio.api.routes import router

__all__ = ["router"]
