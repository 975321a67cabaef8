# scoring/weighted.py
from __future__ import annotations

from typing import Optional

from scoring.answers import Answers
from scoring.bands import EMPTY_BAND, clamp, pct, resolve_band
from scoring.likert import DEFAULT_SCALE_MAX
from scoring.results import InstrumentResult
from scoring.schema import Instrument, Item


def item_max_option(instrument: Instrument, it: Item) -> float:
    top: Optional[float] = it.max_option
    if top is None and instrument.options:
        top = max(o.value for o in instrument.options)
    if top is None:
        top = instrument.scale_max if instrument.scale_max is not None else DEFAULT_SCALE_MAX
    return max(top, 0)


class WeightedSelectScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        """
        Weighted select: weight x clamp(selected, 0, item max option), summed.
        The band comes from the percent-band table applied to total/max.
        """
        total = 0
        max_total = 0
        answered = 0
        for it in instrument.items:
            w = 1 if it.weight is None else max(it.weight, 0)
            top = item_max_option(instrument, it)
            max_total += w * top
            v = answers.number(instrument.id, it.key)
            if v is None:
                continue
            total += w * clamp(v, 0, top)
            answered += 1

        percent = pct(total, max_total)
        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=total,
            max=max_total,
            answered=answered,
            percent=percent,
            band=resolve_band(percent, instrument.percent_bands) if answered else EMPTY_BAND,
        )
