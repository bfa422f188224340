from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.scene import Scene
from .routes import mount_memories_api, mount_view_api


def create_api_app(scene: Scene) -> FastAPI:
    app = FastAPI(title="memorysphere", version="0.1.0")
    app.state.scene = scene

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    mount_memories_api(app, scene)
    mount_view_api(app, scene)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events() -> dict:
        # Minimal polling endpoint: the renderer re-reads /api/layout when this moves.
        return {
            "globalRevision": scene.global_revision(),
            "mode": scene.mode.value,
        }

    return app
