# menucluster/parsers/price_parser.py
"""
Price Parser: finds the menu price in a free-text title.

Two stages, first hit wins:
  1. Currency-aware: "N for M" deals, amounts tagged with a currency symbol
     or ISO code on either side, or a text that is nothing but an amount.
     Reads left to right and keeps the earliest monetary value.
  2. Fallback for untagged text: bare numbers survive only when no unit is
     glued to them (rejects 250g, 6 oz, 15%, 6PM, 39/59). A lone 4-digit
     first candidate is read as a year and rejected.

Public API:
  - find_price(text)   -> float | None
  - detect_price(text) -> PriceMatch | None   (value + which rule matched)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import math
import re


# ── Result type ──────────────────────────────────────

@dataclass(frozen=True)
class PriceMatch:
    value: float
    kind: str   # deal | currency | amount | bare
    text: str   # substring the value was read from


# ── Currency-aware patterns ──────────────────────────

_CURRENCY_SYMBOL = r"""
    (?:
        (?:US|A|C|NZ|HK|R)?\$
      | [£€¥₹₩₽₺₪฿₫₴₦₱]
      | (?<![A-Za-z])(?:USD|EUR|GBP|JPY|CHF|CAD|AUD|NZD|HKD|SEK|NOK|DKK|PLN|CZK|HUF|INR|ZAR|BRL|MXN|TRY)(?![A-Za-z])
      | (?<![A-Za-z])(?:kr|zł|Kč)(?![A-Za-z])
    )
"""

# Thousands groups first (1,299.99 / 1.299,99), then plain amounts (12 / 12,34).
# `,` or `.` followed by one or two digits is a decimal separator.
_AMOUNT = r"""
    (?:
        \d{1,3}(?:[.,]\d{3})+(?:[.,]\d{1,2})?(?!\d)
      | \d+(?:[.,]\d{1,2})?(?!\d)
    )
"""

# Prefixed amounts give up their fraction when another currency follows it:
# "£999.99€" reads as £999.
_FRACTION_GUARD = rf"(?!\d|\s?{_CURRENCY_SYMBOL})"
_PREFIXED_AMOUNT = rf"""
    (?:
        \d{{1,3}}(?:[.,]\d{{3}})+(?:[.,]\d{{1,2}}{_FRACTION_GUARD})?(?!\d)
      | \d+(?:[.,]\d{{1,2}}{_FRACTION_GUARD})?(?!\d)
    )
"""

_MONEY_RE = re.compile(
    rf"""
      (?P<deal>\b\d+\s*(?i:for)\s*(?:{_CURRENCY_SYMBOL}\s?)?(?P<deal_amount>{_AMOUNT})(?![\d/]))
    | (?P<prefixed>{_CURRENCY_SYMBOL}\s?(?P<prefixed_amount>{_PREFIXED_AMOUNT}))
    | (?P<suffixed>(?<!\d)(?P<suffixed_amount>{_AMOUNT})\s?{_CURRENCY_SYMBOL})
    """,
    re.VERBOSE,
)

_WHOLE_AMOUNT_RE = re.compile(rf"^{_AMOUNT}$", re.VERBOSE)

_EDGE_SYMBOL_RE = re.compile(
    rf"^(?:{_CURRENCY_SYMBOL}\s?)+|(?:\s?{_CURRENCY_SYMBOL})+$",
    re.VERBOSE,
)


# ── Fallback patterns ────────────────────────────────

_NUMBER_RE = re.compile(r"(\d+([.,]\d+)?)+")

# number, optional whitespace, optional unit ("g", "oz", "%", "kg/m^2" ...)
_NUMBER_UNIT_RE = re.compile(
    r"""
    ([+\-])?
    ((?:\d+/|(?:\d+|^|\s)\.)?\d+)
    \s*
    (
        [^\s\d+\-.,:;^/]+(?:\^\d+(?:$|(?=[\s:;/])))?
        (?:/[^\s\d+\-.,:;^/]+(?:\^\d+(?:$|(?=[\s:;/])))?)*
    )?
    """,
    re.VERBOSE,
)

_YEAR_RE = re.compile(r"^\d{4}$")

_WS_RE = re.compile(r"\s+")
_DECIMAL_TAIL_RE = re.compile(r"[.,](\d{1,2})$")


# ── Helpers ──────────────────────────────────────────

def normalize_text(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def amount_to_float(raw: str) -> float:
    """
    Parse an amount that may use `,` or `.` for decimals and/or thousands.

      "12,34" -> 12.34   "1,299" -> 1299.0   "1.299,99" -> 1299.99
    """
    m = _DECIMAL_TAIL_RE.search(raw)
    whole, frac = (raw[:m.start()], m.group(1)) if m else (raw, "")
    digits = whole.replace(",", "").replace(".", "")
    return float(f"{digits}.{frac}") if frac else float(digits)


def literal_amount(text: Optional[str]) -> Optional[float]:
    """
    Read `text` as a plain number, ignoring currency symbols at either end.
    Returns None unless the whole text is an amount ("£12.50" -> 12.5,
    "12.50 Burger" -> None).
    """
    if not isinstance(text, str):
        return None
    clean = normalize_text(text)
    clean = _EDGE_SYMBOL_RE.sub("", clean).strip()
    if not _WHOLE_AMOUNT_RE.match(clean):
        return None
    return amount_to_float(clean)


def _currency_match(text: str) -> Optional[PriceMatch]:
    m = _MONEY_RE.search(text)
    if m:
        for kind, group in (("deal", "deal"), ("currency", "prefixed"), ("currency", "suffixed")):
            if m.group(group) is not None:
                amount = m.group(f"{group}_amount")
                return PriceMatch(amount_to_float(amount), kind, m.group(group))

    if _WHOLE_AMOUNT_RE.match(text):
        return PriceMatch(amount_to_float(text), "amount", text)
    return None


def _unit_free_numbers(text: str) -> List[str]:
    """Bare numbers that have no unit attached, in reading order."""
    numbers = [m.group(0) for m in _NUMBER_RE.finditer(text)]
    unit_tokens = {m.group(0).strip() for m in _NUMBER_UNIT_RE.finditer(text)}
    return [n for n in numbers if n in unit_tokens]


# ── Public API ───────────────────────────────────────

def detect_price(text: Optional[str]) -> Optional[PriceMatch]:
    """Return the best-guess price in `text` and the rule that found it."""
    if not isinstance(text, str):
        return None
    clean = normalize_text(text)
    if not clean:
        return None

    found = _currency_match(clean)
    if found is None:
        candidates = _unit_free_numbers(clean)
        # only the first candidate is checked against the year rule
        if candidates and not _YEAR_RE.match(candidates[0]):
            found = PriceMatch(float(candidates[0]), "bare", candidates[0])

    # digit runs past float range parse as inf
    if found is None or not math.isfinite(found.value):
        return None
    return found


def find_price(text: Optional[str]) -> Optional[float]:
    """Return the price in `text` as a float, or None."""
    found = detect_price(text)
    return found.value if found is not None else None
