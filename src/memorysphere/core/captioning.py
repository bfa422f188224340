from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Protocol

from .memory import FALLBACK_DESCRIPTION, Memory

logger = logging.getLogger(__name__)


class Captioner(Protocol):
    def caption(self, memory: Memory) -> str: ...


class FallbackCaptioner:
    """Captioner used when no remote service is configured."""

    def __init__(self, text: str = FALLBACK_DESCRIPTION) -> None:
        self.text = text

    def caption(self, memory: Memory) -> str:  # noqa: ARG002
        return self.text


class CaptionDispatcher:
    """Fire-and-forget caption requests, one per ingested memory.

    Each resolution calls `resolve(memory_id, description)` exactly once. A failing
    captioner resolves with the fallback description instead. Resolutions carry no
    ordering guarantee; `resolve` must tolerate ids that no longer exist.
    """

    def __init__(
        self,
        captioner: Captioner,
        resolve: Callable[[str, str], bool],
        *,
        max_workers: int = 2,
        fallback: str = FALLBACK_DESCRIPTION,
    ) -> None:
        self.captioner = captioner
        self._resolve = resolve
        self._fallback = fallback
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="caption")
        self._lock = threading.Lock()
        self._pending: set[Future[None]] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, memory: Memory) -> bool:
        with self._lock:
            if self._closed:
                logger.warning(f"Caption dispatcher closed; dropping request for {memory.id}")
                return False
            fut = self._executor.submit(self._run, memory)
            self._pending.add(fut)
        fut.add_done_callback(self._done)
        return True

    def _run(self, memory: Memory) -> None:
        try:
            description = str(self.captioner.caption(memory) or "").strip() or self._fallback
        except Exception:
            logger.exception(f"Captioning failed for memory {memory.id}")
            description = self._fallback
        applied = self._resolve(memory.id, description)
        if not applied:
            logger.debug(f"Caption for {memory.id} arrived after the memory was removed")

    def _done(self, fut: Future[None]) -> None:
        with self._lock:
            self._pending.discard(fut)
        if not fut.cancelled() and fut.exception() is not None:
            logger.error(f"Caption resolution raised: {fut.exception()!r}")

    def drain(self, timeout: float | None = None) -> bool:
        """Block until every submitted request resolved. Returns False on timeout."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, *, cancel_pending: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=cancel_pending)
