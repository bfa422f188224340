from __future__ import annotations

from .scene import layouts_to_list, memory_to_dict, rotation_to_dict, scene_to_dict

__all__ = [
    "memory_to_dict",
    "rotation_to_dict",
    "scene_to_dict",
    "layouts_to_list",
]
