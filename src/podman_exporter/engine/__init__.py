from .base import BaseEngineClient
from .podman import PodmanClient

__all__ = ["BaseEngineClient", "PodmanClient"]
