# scoring/results.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from scoring.bands import EMPTY_BAND, Band
from scoring.schema import InstrumentType


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


@dataclass(frozen=True)
class InstrumentResult:
    id: str
    title: str
    type: str
    total: Optional[float] = 0
    max: Optional[float] = None
    answered: int = 0
    band: Band = EMPTY_BAND
    percent: Optional[int] = None
    sub: Optional[str] = None
    note: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def supported(self) -> bool:
        return self.type != InstrumentType.UNSUPPORTED.value

    def answer_space(self) -> Optional[Tuple[float, float]]:
        """
        (score, max) this result adds to a pooled percent, or None.
        Derived-value instruments report their tier weights in
        extra["threat_score"] / extra["threat_max"].
        """
        if not self.supported:
            return None
        if "threat_max" in self.extra:
            top = self.extra["threat_max"]
            return (self.extra.get("threat_score", 0), top) if top else None
        if not _is_number(self.total) or not _is_number(self.max) or self.max <= 0:
            return None
        return self.total, self.max

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "total": self.total,
            "max": self.max,
            "answered": self.answered,
            "band": self.band.to_dict(),
            "percent": self.percent,
            "sub": self.sub,
            "note": self.note,
            **{k: (v.to_dict() if isinstance(v, Band) else v) for k, v in self.extra.items()},
        }


def unsupported_result(instrument_id: str, title: str, note: str) -> InstrumentResult:
    return InstrumentResult(
        id=instrument_id,
        title=title,
        type=InstrumentType.UNSUPPORTED.value,
        total=None,
        note=note,
    )


@dataclass(frozen=True)
class CategorySummary:
    mode: str
    value: Optional[float] = None
    percent: Optional[int] = None
    total: float = 0
    max: float = 0
    band: Band = EMPTY_BAND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "value": self.value,
            "percent": self.percent,
            "total": self.total,
            "max": self.max,
            "band": self.band.to_dict(),
        }


@dataclass(frozen=True)
class CategoryResult:
    id: str
    title: str
    instruments: Tuple[InstrumentResult, ...] = ()
    summary: Optional[CategorySummary] = None

    def find(self, instrument_id: str) -> Optional[InstrumentResult]:
        for r in self.instruments:
            if r.id == instrument_id:
                return r
        return None

    def totals(self) -> Tuple[float, float]:
        """(score, max) this category adds to an answer-space weighted composite."""
        score, max_score = 0.0, 0.0
        for r in self.instruments:
            space = r.answer_space()
            if space is None:
                continue
            score += space[0]
            max_score += space[1]
        return score, max_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "instruments": [r.to_dict() for r in self.instruments],
            "summary": self.summary.to_dict() if self.summary else None,
        }


@dataclass(frozen=True)
class OverallResult:
    mode: Optional[str] = None
    percent: Optional[int] = None
    total: float = 0
    max: float = 0
    band: Band = EMPTY_BAND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "percent": self.percent,
            "total": self.total,
            "max": self.max,
            "band": self.band.to_dict(),
        }


NEUTRAL_OVERALL = OverallResult()


@dataclass(frozen=True)
class AssessmentResult:
    categories: Tuple[CategoryResult, ...] = ()
    overall: OverallResult = NEUTRAL_OVERALL

    def category(self, category_id: str) -> Optional[CategoryResult]:
        for c in self.categories:
            if c.id == category_id:
                return c
        return None

    def instruments(self) -> List[Tuple[CategoryResult, InstrumentResult]]:
        return [(c, r) for c in self.categories for r in c.instruments]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [c.to_dict() for c in self.categories],
            "overall": self.overall.to_dict(),
        }
