# menucluster/layout/text_cluster.py
"""
Text Cluster: a run of fragments that reads as one menu entry.

Fragments are appended in reading order while `is_same_cluster` holds.
Every continuation check compares the candidate with the LAST appended
fragment only; the title is rebuilt from the sequence on demand.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional

from menucluster import settings
from menucluster.fragment_types import MenuItem, TextFragment, same_case
from menucluster.parsers.price_parser import find_price, literal_amount

_WS_RE = re.compile(r"\s+")
_SINGLE_DIGIT_RE = re.compile(r"^\d$")
_WORD_RE = re.compile(r"[^\W_]+")
_CAMEL_SPLIT_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")


def start_case(text: str) -> str:
    """'fish_and-CHIPS' -> 'Fish And CHIPS'; punctuation-only text -> ''."""
    words: List[str] = []
    for token in _WORD_RE.findall(text or ""):
        words.extend(_CAMEL_SPLIT_RE.sub(" ", token).split())
    return " ".join(w[:1].upper() + w[1:] for w in words)


class TextCluster:
    def __init__(
        self,
        fragments: Iterable[TextFragment] = (),
        *,
        same_line_tolerance: Optional[float] = None,
        letter_gap_tolerance: Optional[float] = None,
    ):
        self.fragments: List[TextFragment] = list(fragments)
        self.same_line_tolerance = (
            settings.SAME_LINE_TOLERANCE if same_line_tolerance is None else same_line_tolerance
        )
        self.letter_gap_tolerance = (
            settings.LETTER_GAP_TOLERANCE if letter_gap_tolerance is None else letter_gap_tolerance
        )

    def __len__(self) -> int:
        return len(self.fragments)

    def __iter__(self) -> Iterator[TextFragment]:
        return iter(self.fragments)

    def __bool__(self) -> bool:
        return bool(self.fragments)

    def __repr__(self) -> str:
        return f"TextCluster({self.title!r}, fragments={len(self.fragments)})"

    @property
    def last(self) -> Optional[TextFragment]:
        return self.fragments[-1] if self.fragments else None

    # ── Mutation ─────────────────────────────────────

    def append(self, fragment: TextFragment) -> None:
        self.fragments.append(fragment)

    def merge(self, other: "TextCluster") -> None:
        self.fragments.extend(other.fragments)

    # ── Pairwise geometry ────────────────────────────

    def _on_same_line(self, prev: TextFragment, item: TextFragment) -> bool:
        return abs(prev.y - item.y) < self.same_line_tolerance

    def _in_middle_of_word(self, prev: TextFragment, item: TextFragment) -> bool:
        gap = abs(item.x - prev.right)
        return self._on_same_line(prev, item) and gap < self.letter_gap_tolerance

    # ── Continuation rules (against the last fragment) ──

    def on_same_line(self, candidate: TextFragment) -> bool:
        prev = self.last
        return prev is not None and self._on_same_line(prev, candidate)

    def in_middle_of_word(self, candidate: TextFragment) -> bool:
        prev = self.last
        return prev is not None and self._in_middle_of_word(prev, candidate)

    def same_font(self, candidate: TextFragment) -> bool:
        prev = self.last
        return (
            prev is not None
            and candidate.font_name == prev.font_name
            and same_case(prev.text, candidate.text)
        )

    def continues_on_next_line(self, candidate: TextFragment) -> bool:
        """
        A following line joins only when the entry already shows a price
        and the new line keeps the same font and letter case.
        """
        prev = self.last
        if prev is None:
            return False
        if not self.same_font(candidate):
            return False
        if find_price(self.title) is None:
            return False
        is_after = candidate.y > prev.y
        return is_after and (candidate.y - prev.y) > candidate.height

    def sentence_ended(self, candidate: TextFragment) -> bool:
        prev = self.last
        return prev is not None and prev.text.endswith(".")

    def is_same_cluster(self, candidate: TextFragment) -> bool:
        joined = (
            self.on_same_line(candidate)
            or self.in_middle_of_word(candidate)
            or self.continues_on_next_line(candidate)
        )
        return joined and not self.sentence_ended(candidate)

    # ── Rendering ────────────────────────────────────

    @property
    def title(self) -> str:
        parts: List[str] = []
        prev: Optional[TextFragment] = None
        for frag in self.fragments:
            if prev is not None and self._in_middle_of_word(prev, frag):
                parts.append(frag.text)
            else:
                parts.append(" " + frag.text)
            prev = frag
        title = _WS_RE.sub(" ", "".join(parts))
        return title.replace(" , ", ", ").strip()

    def is_blank(self) -> bool:
        if not self.fragments:
            return True
        clean = self.title.replace("~", "").replace(" ,", ",")
        clean = _WS_RE.sub(" ", clean).strip()
        return not start_case(clean).strip()

    def contains_only_price(self) -> bool:
        """True for stranded price labels ("12.50", "£12.50", ".", "9")."""
        text = self.title
        if text == "." or _SINGLE_DIGIT_RE.match(text):
            return True
        price = find_price(text)
        return price is not None and price == literal_amount(text)

    def export(self) -> MenuItem:
        title = self.title
        return {"title": title, "price": find_price(title)}
