from banana_studio.client.preview import PreviewStore
from banana_studio.client.session import (
    GenerationMetadata,
    GenerationSession,
    Notification,
    SessionState,
)

__all__ = [
    "PreviewStore",
    "GenerationMetadata",
    "GenerationSession",
    "Notification",
    "SessionState",
]
