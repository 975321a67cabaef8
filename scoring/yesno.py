# scoring/yesno.py
from __future__ import annotations

from typing import Any, Dict, List

from scoring.answers import Answers
from scoring.bands import EMPTY_BAND, resolve_band, tier_weight
from scoring.results import InstrumentResult
from scoring.schema import Instrument, Item


def yes_points(instrument: Instrument, it: Item) -> float:
    if it.yes_points is not None:
        return it.yes_points
    if instrument.yes_points is not None:
        return instrument.yes_points
    if it.yes_tier:
        return tier_weight(it.yes_tier)
    # An item with only a no tier is scored on "No" alone.
    return 0 if it.no_tier else 1


def no_points(instrument: Instrument, it: Item) -> float:
    if it.no_points is not None:
        return it.no_points
    if instrument.no_points is not None:
        return instrument.no_points
    return tier_weight(it.no_tier) if it.no_tier else 0


class YesNoScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        """
        Yes/No list: checked items earn their yes points, explicit "No" answers
        their no points. A "Yes" on an item with a yes tier (or a "No" on one
        with a no tier) is reported in extra["risks"].
        """
        total = 0
        max_total = 0
        answered = 0
        risks: List[Dict[str, Any]] = []
        for it in instrument.items:
            yes, no = yes_points(instrument, it), no_points(instrument, it)
            max_total += max(yes, no, 0)
            checked = answers.checked(instrument.id, it.key)
            if checked is None:
                continue
            answered += 1
            if checked:
                total += max(yes, 0)
                if it.yes_tier:
                    risks.append({"key": it.key, "label": it.label, "tier": it.yes_tier})
            else:
                total += max(no, 0)
                if it.no_tier:
                    risks.append({"key": it.key, "label": it.label, "tier": it.no_tier})

        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=total,
            max=max_total,
            answered=answered,
            band=resolve_band(total, instrument.bands) if answered else EMPTY_BAND,
            extra={"risks": risks},
        )
