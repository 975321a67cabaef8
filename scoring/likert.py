# scoring/likert.py
from __future__ import annotations

from scoring.answers import Answers
from scoring.bands import EMPTY_BAND, clamp, resolve_band
from scoring.results import InstrumentResult
from scoring.schema import Instrument

DEFAULT_SCALE_MAX = 4


def scale_max_of(instrument: Instrument) -> float:
    if instrument.scale_max is not None and instrument.scale_max >= 0:
        return instrument.scale_max
    if instrument.options:
        return max(0, max(o.value for o in instrument.options))
    return DEFAULT_SCALE_MAX


def reverse_score(value: float, scale_max: float) -> float:
    return scale_max - value


class LikertScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        """
        Likert sum: each answered item clamped to 0..scaleMax,
        reverse-scored items contribute scaleMax - value.
        """
        top = scale_max_of(instrument)
        total = 0
        answered = 0
        for it in instrument.items:
            v = answers.number(instrument.id, it.key)
            if v is None:
                continue
            v = clamp(v, 0, top)
            if it.key in instrument.reverse:
                v = reverse_score(v, top)
            total += v
            answered += 1

        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=total,
            max=len(instrument.items) * top,
            answered=answered,
            band=resolve_band(total, instrument.bands) if answered else EMPTY_BAND,
        )
