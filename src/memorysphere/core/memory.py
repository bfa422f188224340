from __future__ import annotations

from dataclasses import dataclass

PLACEHOLDER_DESCRIPTION = "Awakening the memory..."
FALLBACK_DESCRIPTION = "A fragment of memory just out of reach..."


@dataclass(frozen=True, kw_only=True)
class Memory:
    """One photo memory shown as an orb.

    Notes:
    - Identity fields never change. `description` / `is_analyzing` are replaced exactly
      once, when the caption for this memory resolves.
    - `phi` is stored already clamped away from the poles.
    """

    id: str
    url: str
    description: str
    timestamp: float
    theta: float
    phi: float
    scale: float = 1.0
    rotation: float = 0.0  # in-plane tilt, degrees
    drift_speed: float = 1.0
    is_analyzing: bool = False


@dataclass(frozen=True)
class MemoryUpload:
    """What the ingestion collaborator hands over for a new memory."""

    url: str
    timestamp: float | None = None
    scale: float | None = None
    rotation: float | None = None
    description: str = PLACEHOLDER_DESCRIPTION


def sort_newest_first(memories: list[Memory]) -> list[Memory]:
    # sorted() is stable: same-timestamp uploads keep their insertion order.
    return sorted(memories, key=lambda m: -float(m.timestamp))
