from __future__ import annotations

from .core.layout import ViewMode
from .core.memory import Memory, MemoryUpload
from .core.scene import Scene
from .core.settings import SceneSettings
from .runtime.server import MemorySphereServer, run
from .sdk.client import MemorySphereClient

__all__ = [
    "run",
    "MemorySphereServer",
    "MemorySphereClient",
    "Scene",
    "SceneSettings",
    "Memory",
    "MemoryUpload",
    "ViewMode",
]
