from __future__ import annotations

from .app import create_app
from .server import MemorySphereServer, run

__all__ = ["create_app", "MemorySphereServer", "run"]
