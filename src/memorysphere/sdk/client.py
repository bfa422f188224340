from __future__ import annotations

from typing import Any


class MemorySphereClient:
    """HTTP client for a running memorysphere server.

    This is the "remote" companion to `memorysphere.run()` / `MemorySphereServer`.
    Every call opens a short-lived httpx client; errors surface as RuntimeError with
    the server's status code and body.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000") -> None:
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return self.base_url + "/"

    def _request(
        self,
        method: str,
        path: str,
        *,
        what: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        timeout_s: float = 10.0,
    ) -> dict[str, Any]:
        import httpx

        with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
            res = client.request(method, path, json=json, params=params)
            if res.status_code >= 400:
                raise RuntimeError(f"Failed to {what}: {res.status_code} {res.text}")
            return res.json()

    # -- memories ----------------------------------------------------------

    def list_memories(self, *, newest_first: bool = False, timeout_s: float = 10.0) -> list[dict[str, Any]]:
        data = self._request(
            "GET",
            "/api/memories",
            what="list memories",
            params={"order": "newest" if newest_first else "insertion"},
            timeout_s=timeout_s,
        )
        return list(data.get("memories") or [])

    def get_memory(self, memory_id: str, *, timeout_s: float = 10.0) -> dict[str, Any]:
        return self._request("GET", f"/api/memories/{memory_id}", what="get memory", timeout_s=timeout_s)

    def ingest(
        self,
        uploads: list[str | dict[str, Any]],
        *,
        timeout_s: float = 10.0,
    ) -> list[str]:
        """Add a batch of memories. Each upload is a url or `{url, timestamp?, scale?, rotation?}`.

        Returns the new memory ids in batch order.
        """

        if not uploads:
            raise ValueError("uploads must not be empty")
        data = self._request("POST", "/api/memories", what="ingest memories", json={"uploads": list(uploads)}, timeout_s=timeout_s)
        created = data.get("memories")
        if not isinstance(created, list):
            raise RuntimeError(f"Invalid ingest response: {data}")
        return [str(m["id"]) for m in created]

    def delete_memory(self, memory_id: str, *, timeout_s: float = 10.0) -> None:
        self._request("DELETE", f"/api/memories/{memory_id}", what="delete memory", timeout_s=timeout_s)

    def resolve_caption(self, memory_id: str, description: str, *, timeout_s: float = 10.0) -> dict[str, Any]:
        data = self._request(
            "PUT",
            f"/api/memories/{memory_id}/caption",
            what="resolve caption",
            json={"description": str(description)},
            timeout_s=timeout_s,
        )
        return dict(data.get("memory") or {})

    # -- scene -------------------------------------------------------------

    def get_scene(self, *, timeout_s: float = 10.0) -> dict[str, Any]:
        return self._request("GET", "/api/scene", what="get scene", timeout_s=timeout_s)

    def global_revision(self, *, timeout_s: float = 10.0) -> int:
        data = self._request("GET", "/api/events", what="poll events", timeout_s=timeout_s)
        return int(data.get("globalRevision", 0))

    def set_viewport(self, width: float, height: float, *, timeout_s: float = 10.0) -> float:
        data = self._request(
            "PUT",
            "/api/scene/viewport",
            what="set viewport",
            json={"width": float(width), "height": float(height)},
            timeout_s=timeout_s,
        )
        return float(data["radius"])

    def set_mode(self, mode: str, *, timeout_s: float = 10.0) -> str:
        data = self._request("POST", "/api/scene/mode", what="set view mode", json={"mode": str(mode)}, timeout_s=timeout_s)
        return str(data["mode"])

    def toggle_view_mode(self, *, timeout_s: float = 10.0) -> str:
        data = self._request("POST", "/api/scene/mode", what="toggle view mode", json={"toggle": True}, timeout_s=timeout_s)
        return str(data["mode"])

    def toggle_gravity_mode(self, *, timeout_s: float = 10.0) -> bool:
        data = self._request("POST", "/api/scene/gravity/toggle", what="toggle gravity", timeout_s=timeout_s)
        return bool(data["gravityMode"])

    def get_layout(self, *, timeout_s: float = 10.0) -> dict[str, Any]:
        return self._request("GET", "/api/layout", what="get layout", timeout_s=timeout_s)

    # -- interaction -------------------------------------------------------

    def get_rotation(self, *, timeout_s: float = 10.0) -> dict[str, Any]:
        return self._request("GET", "/api/rotation", what="get rotation", timeout_s=timeout_s)

    def apply_drag(self, dx: float, dy: float, *, timeout_s: float = 10.0) -> dict[str, Any]:
        return self._request(
            "POST",
            "/api/rotation/drag",
            what="apply drag",
            json={"dx": float(dx), "dy": float(dy)},
            timeout_s=timeout_s,
        )

    def set_zoom(self, delta: float, *, timeout_s: float = 10.0) -> float:
        data = self._request("POST", "/api/zoom", what="set zoom", json={"delta": float(delta)}, timeout_s=timeout_s)
        return float(data["zoom"])

    def navigate(self, direction: str, *, timeout_s: float = 10.0) -> int:
        data = self._request(
            "POST",
            "/api/gallery/navigate",
            what="navigate gallery",
            json={"direction": str(direction)},
            timeout_s=timeout_s,
        )
        return int(data["focusedIndex"])

    def set_focused_index(self, index: int, *, timeout_s: float = 10.0) -> int:
        data = self._request("PUT", "/api/gallery/focus", what="set gallery focus", json={"index": int(index)}, timeout_s=timeout_s)
        return int(data["focusedIndex"])

    def send_input(self, event: dict[str, Any], *, timeout_s: float = 10.0) -> bool:
        """Forward one raw input event (`{type, x, y, targetId?, overChrome?, deltaY?, key?}`)."""
        data = self._request("POST", "/api/input", what="send input event", json=dict(event), timeout_s=timeout_s)
        return bool(data.get("changed"))

    def tick(self, dt: float, *, timeout_s: float = 10.0) -> bool:
        data = self._request("POST", "/api/tick", what="advance animation", json={"dt": float(dt)}, timeout_s=timeout_s)
        return bool(data.get("animating"))
