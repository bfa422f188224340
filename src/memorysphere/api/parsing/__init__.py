from __future__ import annotations

from .bodies import parse_finite_float, parse_int, parse_upload, parse_uploads

__all__ = [
    "parse_finite_float",
    "parse_int",
    "parse_upload",
    "parse_uploads",
]
