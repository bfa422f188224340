from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from ..api import create_api_app
from ..core.scene import Scene
from ..core.settings import SceneSettings

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def create_app(scene: Scene | None = None, *, seed: bool | None = None) -> FastAPI:
    """Create the API app around one Scene.

    Without an explicit scene, settings come from `MEMORYSPHERE_*` variables and the
    initial batch is loaded unless `MEMORYSPHERE_SEED=0`.

    Convenience for uvicorn: `uvicorn memorysphere.runtime.app:create_app --factory`
    """

    if scene is None:
        settings = SceneSettings.from_env()
        if seed is None:
            seed = _env_flag("MEMORYSPHERE_SEED", True)
        scene = Scene.with_seed(settings) if seed else Scene(settings)
        logger.info(f"Created scene with {scene.count()} memories")
    return create_api_app(scene)
