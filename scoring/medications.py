# scoring/medications.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from scoring.answers import Answers
from scoring.bands import EMPTY_BAND, resolve_band
from scoring.results import InstrumentResult
from scoring.schema import Instrument, Item, MedicationClass


def _med_weight(it: Item, cls: Optional[MedicationClass]) -> float:
    if it.weight is not None:
        return max(it.weight, 0)
    if cls is not None and cls.weight is not None:
        return max(cls.weight, 0)
    return 1


def _groups(instrument: Instrument) -> List[Tuple[Optional[MedicationClass], Tuple[Item, ...]]]:
    groups: List[Tuple[Optional[MedicationClass], Tuple[Item, ...]]] = [
        (c, c.items) for c in instrument.classes
    ]
    if instrument.items:
        groups.append((None, instrument.items))
    return groups


class MedicationScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        total = 0
        checked_count = 0
        by_class: Dict[str, Dict[str, Any]] = {}
        for cls, items in _groups(instrument):
            cls_key = cls.key if cls is not None else "other"
            entry = by_class.setdefault(cls_key, {
                "title": cls.title if cls is not None else "Other",
                "checked": 0,
                "total": 0,
            })
            for it in items:
                if answers.checked(instrument.id, it.key) is not True:
                    continue
                w = _med_weight(it, cls)
                total += w
                checked_count += 1
                entry["checked"] += 1
                entry["total"] += w

        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=total,
            max=None,
            answered=checked_count,
            band=resolve_band(total, instrument.bands) if checked_count else EMPTY_BAND,
            extra={"checked_count": checked_count, "classes": by_class},
        )
