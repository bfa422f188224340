from __future__ import annotations

from .captioning import CaptionDispatcher, Captioner, FallbackCaptioner
from .coordinates import clamp_phi, to_cartesian, to_spherical
from .gallery import compute_gallery_layout
from .interaction import InputEvent, InteractionController, input_event_from_dict
from .layout import ModeContext, ViewMode, layout_for
from .memory import FALLBACK_DESCRIPTION, PLACEHOLDER_DESCRIPTION, Memory, MemoryUpload, sort_newest_first
from .orb_layout import OrbLayout, orb_layout_to_dict
from .placement import spread_bound, upload_position, upload_positions
from .radius import compute_radius
from .rotation import RotationEngine
from .scene import Scene
from .settings import DEFAULT_SETTINGS, SceneSettings
from .sphere import compute_sphere_layout
from .spring import Spring, snap_to_balance

__all__ = [
    "CaptionDispatcher",
    "Captioner",
    "FallbackCaptioner",
    "clamp_phi",
    "to_cartesian",
    "to_spherical",
    "compute_gallery_layout",
    "InputEvent",
    "InteractionController",
    "input_event_from_dict",
    "ModeContext",
    "ViewMode",
    "layout_for",
    "FALLBACK_DESCRIPTION",
    "PLACEHOLDER_DESCRIPTION",
    "Memory",
    "MemoryUpload",
    "sort_newest_first",
    "OrbLayout",
    "orb_layout_to_dict",
    "spread_bound",
    "upload_position",
    "upload_positions",
    "compute_radius",
    "RotationEngine",
    "Scene",
    "DEFAULT_SETTINGS",
    "SceneSettings",
    "compute_sphere_layout",
    "Spring",
    "snap_to_balance",
]
