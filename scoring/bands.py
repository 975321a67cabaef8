# scoring/bands.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional


@dataclass(frozen=True)
class Band:
    """Inclusive numeric range with a tier label. Either bound may be open (None)."""
    label: str = ""
    level: str = ""
    min: Optional[float] = None
    max: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    @property
    def empty(self) -> bool:
        return not self.label and not self.level

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "level": self.level}


EMPTY_BAND = Band()

# Tier label -> 1..4 threat weight (higher = worse). Unknown labels weigh 1.
TIER_WEIGHTS: Dict[str, int] = {
    "very high": 4,
    "significant/high risk (26–40) — refer": 4,
    "high": 3,
    "moderate": 2,
    "mild–moderate risk (10–24)": 2,
    "some/lower": 1,
    "lower": 1,
    "low": 1,
    "neutral": 1,
    "some": 1,
}


def tier_weight(label: Optional[str]) -> int:
    if not label:
        return 1
    return TIER_WEIGHTS.get(str(label).strip().lower(), 1)


def band_weight(band: Band) -> int:
    """Threat weight of a resolved band, read from its level first, then its label."""
    return tier_weight(band.level or band.label)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def resolve_band(value: Any, bands: Optional[Iterable[Band]]) -> Band:
    """
    First band (declaration order) whose range contains value.
    No table, no match or a non-numeric value -> EMPTY_BAND.
    """
    if not bands or not _is_number(value):
        return EMPTY_BAND
    for band in bands:
        if band.contains(value):
            return band
    return EMPTY_BAND


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def pct(score: Optional[float], max_score: Optional[float]) -> int:
    """score/max as an integer percent, halves rounded up, clamped to 0..100."""
    if not _is_number(score) or not _is_number(max_score) or max_score <= 0:
        return 0
    raw = score / max_score * 100
    return int(clamp(math.floor(raw + 0.5), 0, 100))
