from __future__ import annotations

from .client import MemorySphereClient

__all__ = ["MemorySphereClient"]
