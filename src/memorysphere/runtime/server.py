from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
import webbrowser
from dataclasses import dataclass

import uvicorn

from ..core.memory import Memory, MemoryUpload
from ..core.scene import Scene
from ..core.settings import SceneSettings
from ..sdk.client import MemorySphereClient
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemorySphereServer:
    host: str
    port: int
    url: str
    scene: Scene

    def client(self) -> MemorySphereClient:
        return MemorySphereClient(self.url.rstrip("/"))

    def ingest(self, uploads: list[MemoryUpload | str]) -> list[Memory]:
        """Add memories straight into the in-process scene."""
        return self.scene.ingest(uploads)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort probe to determine if a memorysphere server is reachable."""

    import httpx

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            return bool(r.json().get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    open_browser: bool = False,
    seed: bool = True,
    settings: SceneSettings | None = None,
    scene: Scene | None = None,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 10.0,
) -> MemorySphereServer | MemorySphereClient:
    """Start the memorysphere API with a single Python call.

    Behavior:
    - If MEMORYSPHERE_URL is set, we *attach* to that existing server (client mode) unless
      `new_server=True`.
    - Otherwise, if `port != 0` and a server is already reachable at http://{host}:{port},
      we attach to it (client mode) unless `new_server=True`.
    - Otherwise we start a new local server (server mode) and return a `MemorySphereServer`.

    Notes:
    - `port=0` means "pick a free port", so there's nothing to attach to.
    - `scene` injects a prebuilt Scene; otherwise one is built from `settings` (or the
      environment), seeded unless `seed=False`.
    - Uvicorn's per-request access log is off by default because the renderer polls
      `/api/events` every frame.
    """

    env_url = _normalize_base_url(os.getenv("MEMORYSPHERE_URL", ""))

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info(f"Attaching to running server at {env_url}")
            if open_browser:
                webbrowser.open(env_url + "/")
            return MemorySphereClient(env_url)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info(f"Attaching to running server at {default_url}")
            if open_browser:
                webbrowser.open(default_url + "/")
            return MemorySphereClient(default_url)

    # 3) Start a fresh server.
    if port == 0:
        port = _find_free_port(host)

    if scene is None:
        s = settings or SceneSettings.from_env()
        scene = Scene.with_seed(s) if seed else Scene(s)
    app = create_app(scene)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout_s
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError(f"Server failed to start on {host}:{port}")
        if time.monotonic() > deadline:
            raise RuntimeError(f"Server did not start within {startup_timeout_s}s")
        time.sleep(0.01)

    url = f"http://{host}:{port}/"
    logger.info(f"Serving {scene.count()} memories at {url}")
    if open_browser:
        webbrowser.open(url)

    return MemorySphereServer(host=host, port=port, url=url, scene=scene)
