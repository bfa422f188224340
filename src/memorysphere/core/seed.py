from __future__ import annotations

import random
import time

from .coordinates import fibonacci_sphere_position
from .memory import Memory

_DAY_S = 86400.0

_UNSPLASH = "https://images.unsplash.com/{}?q=80&w=600&auto=format&fit=crop"

# (id, unsplash photo, description, scale, rotation)
SEED_MEMORIES: tuple[tuple[str, str, str, float, float], ...] = (
    ("mem-sunset", "photo-1507525428034-b723cf961d3e", "The sun sank below the horizon and took the last of the noise with it.", 1.1, -5),
    ("mem-forest", "photo-1511497584788-876760111969", "The breathing of the deep woods is the oldest language on earth.", 1.0, 5),
    ("mem-urban", "photo-1449824913935-59a10b8d2000", "City lights fading out, hiding a thousand private thoughts.", 1.15, -8),
    ("mem-coffee", "photo-1495474472287-4d71bcdd2085", "Time turned slow and rich in the smell of coffee.", 0.9, 12),
    ("mem-sea", "photo-1505118380757-91f5f5632de0", "Waves brushing the sand, erasing yesterday's footprints.", 1.2, 0),
    ("mem-stars", "photo-1419242902214-272b3f66ee7a", "Under the gaze of stardust we are all children.", 1.05, -15),
    ("mem-book", "photo-1544947950-fa07a98d237f", "Castles built of words outlast the real ones.", 0.95, 8),
    ("mem-cat", "photo-1514888286974-6c03e2ca1dba", "A soft stare that healed a hard world.", 1.0, -4),
    ("mem-rain", "photo-1515694346937-94d85e41e6f0", "Raindrops on the window frame, like an unfinished poem.", 1.08, 6),
    ("mem-flower", "photo-1460039230329-eb070fc6c77c", "A bloom lasts an instant yet keeps a whole spring.", 0.92, -10),
    ("mem-snow", "photo-1548266652-99cf27701ced", "The world white as new, every road behind us covered.", 1.02, 3),
    ("mem-night", "photo-1470252649378-9c29740c9fa8", "A gentle night that shelters every wandering dream.", 0.98, -6),
    ("mem-mountain", "photo-1464822759023-fed622ff2c3b", "Silent mountains keeping a secret a thousand years old.", 1.1, -3),
    ("mem-road", "photo-1470240731273-7821a6eeb6bd", "The road runs on under our feet towards somewhere unknown.", 0.95, 7),
    ("mem-desert", "photo-1473580044384-7ba9967e16a0", "Wind carving the shape of time into the dunes.", 1.05, 2),
    ("mem-lake", "photo-1439853949127-fa647821eba0", "A mirror lake reflecting the bottom of the soul.", 1.0, -5),
    ("mem-autumn", "photo-1477414348463-c0eb7f1359b6", "Falling leaves, the season's last goodbye.", 1.12, 9),
    ("mem-crowd", "photo-1533038590840-1cde6e668a91", "A surging crowd where everyone is an island.", 0.93, -12),
    ("mem-window", "photo-1508144753681-9986d4df99b3", "The world outside the window always felt more real than dreams.", 1.08, 4),
    ("mem-camera", "photo-1516035069371-29a1b244cc32", "The shutter clicks and this moment becomes forever.", 1.0, -7),
    ("mem-bridge", "photo-1506461883276-594a12b11cf3", "It is not only bridges that join the far shores.", 1.06, 6),
    ("mem-train", "photo-1474487548417-781cb71495f3", "The whistle blows, carrying longing far away.", 0.98, 10),
    ("mem-beach-2", "photo-1496275068113-fff8c90750d1", "The tide wipes the footprints but the sea remembers.", 1.03, -2),
    ("mem-bicycle", "photo-1485965120184-e220f721d03e", "Wheels turning, the sound of youth rushing past.", 0.96, 5),
    ("mem-piano", "photo-1520523839897-bd0b52f945a0", "Words never spoken, dancing on black and white keys.", 1.04, -6),
    ("mem-clock", "photo-1508057198894-247b23fe5ade", "The hands never stop; time is the only witness.", 1.1, -11),
    ("mem-vinyl", "photo-1461360370896-922624d12aa1", "The needle drops and old days flow slowly back.", 1.02, 3),
    ("mem-letter", "photo-1579783900882-c0d3dad7b119", "A short letter, a long feeling, warmth in the handwriting.", 0.97, -4),
    ("mem-clouds", "photo-1501630834273-4b5604d2ee31", "Clouds rolling and unrolling, the sky's gentlest thoughts.", 1.13, -8),
    ("mem-guitar", "photo-1510915361894-db8b60106cb1", "Trembling strings telling a story without words.", 0.95, -5),
    ("mem-camp", "photo-1523987355523-c7b5b0dd90a7", "A leaping campfire warming the cold night.", 1.05, 6),
    ("mem-aurora", "photo-1531366936337-7c912a4589a7", "Dancing aurora, the dream of the sky.", 1.15, -7),
    ("mem-sakura", "photo-1522383225653-ed111181a951", "Cherry petals falling at five centimeters per second.", 1.08, -6),
)


def seed_memories(*, now: float | None = None, rng: random.Random | None = None) -> list[Memory]:
    """The initial batch, spread evenly on the sphere and spaced two days apart in time."""
    t0 = time.time() if now is None else float(now)
    r = rng or random.Random()
    total = len(SEED_MEMORIES)
    out: list[Memory] = []
    for index, (mid, photo, description, scale, rotation) in enumerate(SEED_MEMORIES):
        theta, phi = fibonacci_sphere_position(index, total)
        out.append(
            Memory(
                id=mid,
                url=_UNSPLASH.format(photo),
                description=description,
                timestamp=t0 - index * 2.0 * _DAY_S,
                theta=theta,
                phi=phi,
                scale=float(scale),
                rotation=float(rotation),
                drift_speed=0.8 + r.random() * 0.4,
                is_analyzing=False,
            )
        )
    return out
