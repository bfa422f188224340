from __future__ import annotations

from fastapi import FastAPI, HTTPException

from ...core.interaction import input_event_from_dict
from ...core.scene import Scene
from ..parsing import parse_finite_float, parse_int
from ..serializers import layouts_to_list, rotation_to_dict, scene_to_dict


def mount_view_api(app: FastAPI, scene: Scene) -> None:
    @app.get("/api/scene")
    def get_scene() -> dict:
        return scene_to_dict(scene)

    @app.put("/api/scene/viewport")
    def set_viewport(body: dict) -> dict:
        try:
            width = parse_finite_float(body.get("width"), field="width")
            height = parse_finite_float(body.get("height"), field="height")
            radius = scene.set_viewport(width, height)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return {"ok": True, "radius": float(radius)}

    @app.post("/api/scene/mode")
    def set_mode(body: dict) -> dict:
        # Supported:
        # - {"mode": "sphere" | "gallery"}
        # - {"toggle": true}
        if body.get("toggle"):
            mode = scene.toggle_view_mode()
        else:
            if "mode" not in body:
                raise HTTPException(status_code=400, detail="Missing field: mode")
            try:
                mode = scene.set_mode(body.get("mode"))
            except ValueError as ex:
                raise HTTPException(status_code=400, detail=str(ex))
        return {"ok": True, "mode": mode.value}

    @app.post("/api/scene/gravity/toggle")
    def toggle_gravity() -> dict:
        return {"ok": True, "gravityMode": scene.toggle_gravity_mode()}

    @app.get("/api/layout")
    def get_layout() -> dict:
        return {
            "mode": scene.mode.value,
            "radius": float(scene.radius()),
            "globalRevision": scene.global_revision(),
            "items": layouts_to_list(scene.layouts()),
        }

    @app.get("/api/rotation")
    def get_rotation() -> dict:
        return rotation_to_dict(scene)

    @app.post("/api/rotation/drag")
    def drag(body: dict) -> dict:
        try:
            dx = parse_finite_float(body.get("dx"), field="dx")
            dy = parse_finite_float(body.get("dy"), field="dy")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        changed = scene.apply_drag(dx, dy)
        return {"ok": True, "changed": changed, **rotation_to_dict(scene)}

    @app.post("/api/zoom")
    def zoom(body: dict) -> dict:
        try:
            delta = parse_finite_float(body.get("delta"), field="delta")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return {"ok": True, "zoom": float(scene.set_zoom(delta))}

    @app.post("/api/gallery/navigate")
    def navigate(body: dict) -> dict:
        try:
            index = scene.navigate(str(body.get("direction", "")))
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return {"ok": True, "focusedIndex": int(index)}

    @app.put("/api/gallery/focus")
    def focus(body: dict) -> dict:
        try:
            index = parse_int(body.get("index"), field="index")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return {"ok": True, "focusedIndex": int(scene.set_focused_index(index))}

    @app.post("/api/input")
    def handle_input(body: dict) -> dict:
        try:
            event = input_event_from_dict(body)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        changed = scene.handle_event(event)
        return {"ok": True, "changed": changed, "globalRevision": scene.global_revision()}

    @app.post("/api/tick")
    def tick(body: dict) -> dict:
        try:
            dt = parse_finite_float(body.get("dt"), field="dt")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        if dt < 0.0:
            raise HTTPException(status_code=400, detail="dt must be >= 0")
        animating = scene.tick(dt)
        return {"ok": True, "animating": animating, "globalRevision": scene.global_revision()}
