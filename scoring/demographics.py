# scoring/demographics.py
"""
Derived-value instruments: age passthrough and BMI.

Nothing is summed here. Each derived value is resolved against its own band
table and reported in extra; total stays 0 so parents never see a None.
Resolved bands also carry a 1..4 threat weight (threat_score / threat_max)
for pooled percents.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from scoring.answers import Answers
from scoring.bands import EMPTY_BAND, Band, band_weight, resolve_band
from scoring.results import InstrumentResult
from scoring.schema import Instrument

M_PER_INCH = 0.0254
KG_PER_LB = 0.45359237
TIER_MAX = 4

_US_UNITS = {"us", "imperial", "in", "lb"}
_METRIC_UNITS = {"metric", "si", "m", "kg"}


def _positive(v: Optional[float]) -> bool:
    return v is not None and v > 0


def compute_bmi(
    units: str = "",
    height_m: Optional[float] = None,
    weight_kg: Optional[float] = None,
    height_ft: Optional[float] = None,
    height_in: Optional[float] = None,
    weight_lb: Optional[float] = None,
) -> Optional[float]:
    """
    BMI = kg / m^2, rounded to one decimal. US inputs (ft/in/lb) are converted
    first. Returns None when the required inputs are missing or non-positive.
    """
    u = (units or "").strip().lower()
    if u not in _US_UNITS and u not in _METRIC_UNITS:
        u = "metric" if (height_m is not None or weight_kg is not None) else "us"

    if u in _METRIC_UNITS:
        if not (_positive(height_m) and _positive(weight_kg)):
            return None
        m, kg = height_m, weight_kg
    else:
        inches = 0 if height_in is None else height_in
        if not (_positive(height_ft) and inches >= 0 and _positive(weight_lb)):
            return None
        m = (height_ft * 12 + inches) * M_PER_INCH
        kg = weight_lb * KG_PER_LB

    return round(kg / (m * m), 1)


def _age(instrument: Instrument, answers: Answers) -> Optional[float]:
    v = answers.number(instrument.id, "age")
    if v is None or v < 0:
        return None
    return int(v) if float(v).is_integer() else v


def _bmi(instrument: Instrument, answers: Answers) -> Optional[float]:
    def n(key: str) -> Optional[float]:
        return answers.number(instrument.id, key)

    return compute_bmi(
        units=answers.text(instrument.id, "units"),
        height_m=n("height_m"),
        weight_kg=n("weight_kg"),
        height_ft=n("height_ft"),
        height_in=n("height_in"),
        weight_lb=n("weight_lb"),
    )


def _band_or_empty(value: Optional[float], bands: Tuple[Band, ...]) -> Band:
    return resolve_band(value, bands) if value is not None else EMPTY_BAND


def _threat(*bands: Band) -> Dict[str, int]:
    # Each resolved band weighs 1..4 out of TIER_MAX.
    resolved = [b for b in bands if not b.empty]
    return {
        "threat_score": sum(band_weight(b) for b in resolved),
        "threat_max": TIER_MAX * len(resolved),
    }


class DemographicsScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        age = _age(instrument, answers)
        bmi = _bmi(instrument, answers)
        age_band = _band_or_empty(age, instrument.age_bands)
        bmi_band = _band_or_empty(bmi, instrument.bmi_bands)
        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=0,
            answered=int(age is not None) + int(bmi is not None),
            extra={
                "age": age,
                "age_band": age_band,
                "bmi": bmi,
                "bmi_band": bmi_band,
                **_threat(age_band, bmi_band),
            },
        )


class BMIScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        bmi = _bmi(instrument, answers)
        band = _band_or_empty(bmi, instrument.bmi_bands or instrument.bands)
        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=0,
            answered=int(bmi is not None),
            band=band,
            extra={"bmi": bmi, "bmi_band": band, **_threat(band)},
        )
