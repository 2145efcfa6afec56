# menucluster/settings.py
"""
Tuning knobs for fragment clustering + portal config.

Values come from the environment (optionally loaded from `.env` at the repo
root) so layout heuristics can be tuned per menu style without code changes.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

# --- Load .env if present (never overrides variables already set) ---
load_dotenv(ROOT / ".env")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Max vertical offset (in source units) for two fragments to share a text line.
SAME_LINE_TOLERANCE = _env_float("MENUCLUSTER_SAME_LINE_TOLERANCE", 3.0)

# Max horizontal gap between two same-line fragments that are parts of one word.
LETTER_GAP_TOLERANCE = _env_float("MENUCLUSTER_LETTER_GAP_TOLERANCE", 0.5)

LOG_LEVEL = (os.getenv("MENUCLUSTER_LOG_LEVEL") or "INFO").upper()

MAX_CONTENT_LENGTH = _env_int("MENUCLUSTER_MAX_CONTENT_LENGTH", 5 * 1024 * 1024)
