from __future__ import annotations

from fastapi import FastAPI, HTTPException

from ...core.scene import Scene
from ..parsing import parse_uploads
from ..serializers import memory_to_dict


def mount_memories_api(app: FastAPI, scene: Scene) -> None:
    @app.get("/api/memories")
    def list_memories(order: str = "insertion") -> dict:
        if order == "insertion":
            items = scene.list_memories()
        elif order == "newest":
            items = scene.sorted_memories()
        else:
            raise HTTPException(status_code=400, detail="order must be 'insertion' or 'newest'")
        return {"memories": [memory_to_dict(m) for m in items]}

    @app.post("/api/memories")
    def ingest(body: dict) -> dict:
        try:
            uploads = parse_uploads(body)
            created = scene.ingest(uploads)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return {
            "ok": True,
            "memories": [memory_to_dict(m) for m in created],
            "globalRevision": scene.global_revision(),
        }

    @app.get("/api/memories/{memory_id}")
    def get_memory(memory_id: str) -> dict:
        m = scene.get_memory(memory_id)
        if m is None:
            raise HTTPException(status_code=404, detail=f"Unknown memory: {memory_id}")
        return memory_to_dict(m)

    @app.delete("/api/memories/{memory_id}")
    def delete_memory(memory_id: str) -> dict:
        if not scene.remove_memory(memory_id):
            raise HTTPException(status_code=404, detail=f"Unknown memory: {memory_id}")
        return {"ok": True, "globalRevision": scene.global_revision()}

    @app.put("/api/memories/{memory_id}/caption")
    def resolve_caption(memory_id: str, body: dict) -> dict:
        description = body.get("description")
        if description is None or not str(description).strip():
            raise HTTPException(status_code=400, detail="description is required")
        if not scene.apply_caption(memory_id, str(description)):
            raise HTTPException(status_code=404, detail=f"Unknown memory: {memory_id}")
        m = scene.get_memory(memory_id)
        return {"ok": True, "memory": memory_to_dict(m) if m is not None else None}
