from __future__ import annotations

from .memories import mount_memories_api
from .view import mount_view_api

__all__ = ["mount_memories_api", "mount_view_api"]
