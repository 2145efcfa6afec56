# menucluster/fragment_types.py
"""
Fragment + menu item types shared by the layout engine and the portal.

RawFragment is the per-glyph-run record a document text extractor hands us
(one page at a time, already in reading order). TextFragment is the
normalized, immutable view the clustering code works on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
import re
from typing import Any, List, Mapping, Optional, TypedDict


# ────────────────────────────────────────────────
# 🧾 Wire shapes (TypedDicts, API surface)
# ────────────────────────────────────────────────

# "str" collides with the builtin, hence the functional form.
RawFragment = TypedDict(
    "RawFragment",
    {
        "str": str,
        "transform": List[float],   # affine [a, b, c, d, x, y]
        "width": float,
        "fontName": str,
    },
    total=False,
)


class MenuItem(TypedDict):
    title: str
    price: Optional[float]


# ────────────────────────────────────────────────
# 🔠 Letter-case classification
# ────────────────────────────────────────────────

class TextCase(Enum):
    UPPER = "upper"      # has letters, all uppercase ("FISH & CHIPS")
    MIXED = "mixed"      # has at least one lowercase letter ("Fish")
    UNCASED = "uncased"  # digits / punctuation only ("12.50")


def classify_case(text: Optional[str]) -> TextCase:
    text = text or ""
    if text != text.upper():
        return TextCase.MIXED
    if text != text.lower():
        return TextCase.UPPER
    return TextCase.UNCASED


def same_case(a: Optional[str], b: Optional[str]) -> bool:
    """
    True when both texts sit on the same side of the upper/lower split.
    UNCASED text reads the same uppercased, so it pairs with UPPER.
    """
    return (classify_case(a) is TextCase.MIXED) == (classify_case(b) is TextCase.MIXED)


# ────────────────────────────────────────────────
# 🔤 Normalized fragment
# ────────────────────────────────────────────────

_WS_RE = re.compile(r"\s+")


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


@dataclass(frozen=True)
class TextFragment:
    """
    One positioned text run.

    `height` is the transform's horizontal scale `a`, which for unrotated
    text equals the font size. It stands in for line height; it is not a
    measured glyph height.
    """
    text: str
    x: float
    y: float
    width: float
    height: float
    font_name: Optional[str]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_raw(cls, raw: RawFragment) -> "TextFragment":
        transform = raw.get("transform")
        if not isinstance(transform, (list, tuple)):
            transform = ()
        a, x, y = (
            _as_float(transform[i]) if len(transform) > i else math.nan
            for i in (0, 4, 5)
        )

        text = raw.get("str")
        text = _WS_RE.sub(" ", text) if isinstance(text, str) else ""

        font = raw.get("fontName")
        return cls(
            text=text,
            x=x,
            y=y,
            width=_as_float(raw.get("width")),
            height=a,
            font_name=font if isinstance(font, str) else None,
            raw=raw,
        )

    @property
    def right(self) -> float:
        return self.x + self.width
