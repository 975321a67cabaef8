# scoring/radio.py
from __future__ import annotations

from scoring.answers import Answers
from scoring.bands import EMPTY_BAND, clamp, resolve_band
from scoring.results import InstrumentResult
from scoring.schema import Instrument


def _selected_value(options, value):
    """Selected numeric value, or None when it is not one of the declared options."""
    if not options:
        return value
    for o in options:
        if o.value == value:
            return o.value
    return None


class RadioScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        total = 0
        answered = 0
        max_total = 0
        for it in instrument.items:
            if it.max is not None and it.max > 0:
                max_total += it.max
            v = answers.number(instrument.id, it.key)
            if v is None:
                continue
            v = _selected_value(it.options or instrument.options, v)
            if v is None or v < 0:
                continue
            if it.max is not None and it.max >= 0:
                v = clamp(v, 0, it.max)
            total += v
            answered += 1

        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=total,
            max=max_total,
            answered=answered,
            band=resolve_band(total, instrument.bands) if answered else EMPTY_BAND,
        )
