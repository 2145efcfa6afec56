# menucluster/contracts.py
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from menucluster.fragment_types import RawFragment

"""
Contracts & validators for the fragment ingestion API.

The layout engine itself never rejects content (bad coordinates just fail
to cluster); these checks only guard the *shape* of HTTP payloads so the
portal can answer 400 instead of silently returning nothing.
"""


def _is_floatlike(x: Any) -> bool:
    if isinstance(x, bool):
        return False
    try:
        float(x)
        return True
    except (TypeError, ValueError):
        return False


def validate_fragment(frag: Any, where: str) -> Tuple[bool, str]:
    if not isinstance(frag, dict):
        return False, f"{where} must be an object"

    text = frag.get("str", "")
    if text is not None and not isinstance(text, str):
        return False, f"{where}.str must be a string"

    if "transform" in frag:
        transform = frag["transform"]
        if not isinstance(transform, list) or len(transform) != 6:
            return False, f"{where}.transform must be a list of 6 numbers"
        if not all(_is_floatlike(v) or v is None for v in transform):
            return False, f"{where}.transform must be a list of 6 numbers"

    if "width" in frag and frag["width"] is not None and not _is_floatlike(frag["width"]):
        return False, f"{where}.width must be a number"

    if "fontName" in frag and frag["fontName"] is not None and not isinstance(frag["fontName"], str):
        return False, f"{where}.fontName must be a string"

    return True, ""


def validate_fragment_list(fragments: Any, where: str = "fragments") -> Tuple[bool, str]:
    if not isinstance(fragments, list):
        return False, f"{where} must be a list"
    for i, frag in enumerate(fragments):
        ok, err = validate_fragment(frag, f"{where}[{i}]")
        if not ok:
            return ok, err
    return True, ""


def pages_from_payload(payload: Dict[str, Any]) -> Tuple[List[List[RawFragment]], str]:
    """
    Accept either {"fragments": [...]} (one page) or {"pages": [[...], ...]}.

    Returns (pages, error_message); pages is empty when error_message is set.
    """
    if "pages" in payload:
        pages = payload["pages"]
        if not isinstance(pages, list):
            return [], "pages must be a list"
        for p, page in enumerate(pages):
            ok, err = validate_fragment_list(page, f"pages[{p}]")
            if not ok:
                return [], err
        return pages, ""

    if "fragments" in payload:
        ok, err = validate_fragment_list(payload["fragments"])
        if not ok:
            return [], err
        return [payload["fragments"]], ""

    return [], "missing top-level key: fragments or pages"


def tolerances_from_payload(payload: Dict[str, Any]) -> Tuple[Dict[str, Optional[float]], str]:
    """Optional per-request overrides for the clustering tolerances."""
    out: Dict[str, Optional[float]] = {}
    for key in ("same_line_tolerance", "letter_gap_tolerance"):
        val = payload.get(key)
        if val is None:
            out[key] = None
        elif not _is_floatlike(val) or not math.isfinite(float(val)) or float(val) < 0:
            return {}, f"{key} must be a finite non-negative number"
        else:
            out[key] = float(val)
    return out, ""
