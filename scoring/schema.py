# scoring/schema.py
"""
Typed view of the instrument schema (data/instruments_config.json).

Parsing is tolerant: a node of the wrong shape degrades to an empty value or,
for instruments, to the UNSUPPORTED variant. It never raises for data that is
structurally present. Keys are read in snake_case or in the camelCase the JSON
config uses.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from scoring.bands import Band


class InstrumentType(str, Enum):
    DEMOGRAPHICS = "demographics"
    BMI = "bmi"
    YN_LIST = "yn_list"
    LIKERT = "likert"
    RADIO = "radio"
    WEIGHTED_SELECT = "weighted_select"
    MEDICATIONS = "medications"
    VFQ_ROUTED = "vfq_routed"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, tag: Any) -> "InstrumentType":
        key = str(tag or "").strip().lower().replace("-", "_").replace(" ", "_")
        return _TYPE_ALIASES.get(key, cls.UNSUPPORTED)


_TYPE_ALIASES: Dict[str, InstrumentType] = {
    "demographics": InstrumentType.DEMOGRAPHICS,
    "demographic": InstrumentType.DEMOGRAPHICS,
    "bmi": InstrumentType.BMI,
    "yn_list": InstrumentType.YN_LIST,
    "yes_no_list": InstrumentType.YN_LIST,
    "yesno": InstrumentType.YN_LIST,
    "likert": InstrumentType.LIKERT,
    "radio": InstrumentType.RADIO,
    "single_choice_radio": InstrumentType.RADIO,
    "weighted_select": InstrumentType.WEIGHTED_SELECT,
    "medications": InstrumentType.MEDICATIONS,
    "medication_classes": InstrumentType.MEDICATIONS,
    "vfq_routed": InstrumentType.VFQ_ROUTED,
    "vfq_3_of_7": InstrumentType.VFQ_ROUTED,
    "vfq3of7": InstrumentType.VFQ_ROUTED,
}


# ─────────────────────────────────────────────────────────────
# Field readers
# ─────────────────────────────────────────────────────────────
def _get(d: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for n in names:
        if n in d and d[n] is not None:
            return d[n]
    return default


def _num(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return v if math.isfinite(v) else None
    if isinstance(v, str):
        try:
            f = float(v.strip())
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


def _str(v: Any) -> str:
    return "" if v is None else str(v)


def _dicts(v: Any) -> List[Mapping[str, Any]]:
    if not isinstance(v, (list, tuple)):
        return []
    return [x for x in v if isinstance(x, Mapping)]


def parse_band(d: Mapping[str, Any]) -> Band:
    return Band(
        label=_str(_get(d, "label", "tier")),
        level=_str(_get(d, "level")),
        min=_num(_get(d, "min", "minPct", "min_pct")),
        max=_num(_get(d, "max", "maxPct", "max_pct")),
    )


def parse_bands(v: Any) -> Tuple[Band, ...]:
    return tuple(parse_band(b) for b in _dicts(v))


# ─────────────────────────────────────────────────────────────
# Schema nodes
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Option:
    value: float
    label: str = ""


def parse_options(v: Any) -> Tuple[Option, ...]:
    """[{value,label}, ...] or {label: value} (scale maps) -> options."""
    out: List[Option] = []
    if isinstance(v, Mapping):
        for label, value in v.items():
            n = _num(value)
            if n is not None:
                out.append(Option(value=n, label=_str(label)))
        return tuple(out)
    for o in _dicts(v):
        n = _num(o.get("value"))
        if n is not None:
            out.append(Option(value=n, label=_str(o.get("label"))))
    return tuple(out)


@dataclass(frozen=True)
class Item:
    key: str
    label: str = ""
    weight: Optional[float] = None
    options: Tuple[Option, ...] = ()
    yes_tier: str = ""
    no_tier: str = ""
    yes_points: Optional[float] = None
    no_points: Optional[float] = None
    max: Optional[float] = None
    csv_key: str = ""

    @property
    def max_option(self) -> Optional[float]:
        if not self.options:
            return None
        return max(o.value for o in self.options)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], index: int = 0) -> "Item":
        key = _str(_get(d, "key", "id", "csvKey", "csv_key", default=f"item{index + 1}"))
        return cls(
            key=key,
            label=_str(_get(d, "label", "text", default=key)),
            weight=_num(_get(d, "weight")),
            options=parse_options(_get(d, "options", "choices")),
            yes_tier=_str(_get(d, "yesTier", "yes_tier")),
            no_tier=_str(_get(d, "noTier", "no_tier")),
            yes_points=_num(_get(d, "yesPoints", "yes_points", "points")),
            no_points=_num(_get(d, "noPoints", "no_points")),
            max=_num(_get(d, "max")),
            csv_key=_str(_get(d, "csvKey", "csv_key")),
        )


def parse_items(v: Any) -> Tuple[Item, ...]:
    return tuple(Item.from_dict(d, i) for i, d in enumerate(_dicts(v)))


@dataclass(frozen=True)
class MedicationClass:
    key: str
    title: str = ""
    weight: Optional[float] = None
    items: Tuple[Item, ...] = ()

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], index: int = 0) -> "MedicationClass":
        key = _str(_get(d, "key", "id", default=f"class{index + 1}"))
        return cls(
            key=key,
            title=_str(_get(d, "title", "label", default=key)),
            weight=_num(_get(d, "weight", "baseRisk", "base_risk")),
            items=parse_items(_get(d, "items", "meds")),
        )


@dataclass(frozen=True)
class Instrument:
    id: str
    title: str = ""
    type: InstrumentType = InstrumentType.UNSUPPORTED
    type_tag: str = ""
    items: Tuple[Item, ...] = ()
    bands: Tuple[Band, ...] = ()
    percent_bands: Tuple[Band, ...] = ()
    reverse: frozenset = frozenset()
    scale_max: Optional[float] = None
    options: Tuple[Option, ...] = ()
    yes_points: Optional[float] = None
    no_points: Optional[float] = None
    classes: Tuple[MedicationClass, ...] = ()
    age_bands: Tuple[Band, ...] = ()
    bmi_bands: Tuple[Band, ...] = ()

    @classmethod
    def from_dict(cls, d: Any, index: int = 0) -> "Instrument":
        if not isinstance(d, Mapping):
            return cls(id=f"instrument{index + 1}", type_tag=type(d).__name__)
        iid = _str(_get(d, "id", "key", default=f"instrument{index + 1}"))
        tag = _get(d, "type", default="")
        reverse = _get(d, "reverse", "reverseItems", "reverse_items", default=())
        if isinstance(reverse, str):
            reverse = [reverse]
        elif not isinstance(reverse, (list, tuple, set, frozenset)):
            reverse = ()
        return cls(
            id=iid,
            title=_str(_get(d, "title", "label", default=iid)),
            type=InstrumentType.parse(tag),
            type_tag=_str(tag),
            items=parse_items(_get(d, "items")),
            bands=parse_bands(_get(d, "bands")),
            percent_bands=parse_bands(_get(d, "percentBands", "percent_bands")),
            reverse=frozenset(_str(k) for k in reverse),
            scale_max=_num(_get(d, "scaleMax", "scale_max")),
            options=parse_options(_get(d, "options", "scale")),
            yes_points=_num(_get(d, "yesPoints", "yes_points", "pointsIfChecked")),
            no_points=_num(_get(d, "noPoints", "no_points", "pointsIfUnchecked")),
            classes=tuple(MedicationClass.from_dict(c, i)
                          for i, c in enumerate(_dicts(_get(d, "classes")))),
            age_bands=parse_bands(_get(d, "ageBands", "age_bands")),
            bmi_bands=parse_bands(_get(d, "bmiBands", "bmi_bands")),
        )


def parse_instruments(v: Any) -> Tuple[Instrument, ...]:
    if not isinstance(v, (list, tuple)):
        return ()
    return tuple(Instrument.from_dict(d, i) for i, d in enumerate(v))


@dataclass(frozen=True)
class SubGroup:
    key: str
    title: str = ""
    instruments: Tuple[Instrument, ...] = ()

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], index: int = 0) -> "SubGroup":
        key = _str(_get(d, "key", "id", default=f"group{index + 1}"))
        return cls(
            key=key,
            title=_str(_get(d, "title", "label", default=key)),
            instruments=parse_instruments(_get(d, "instruments")),
        )


@dataclass(frozen=True)
class SummaryRule:
    mode: str
    sources: Tuple[str, ...] = ()
    bands: Tuple[Band, ...] = ()
    percent_bands: Tuple[Band, ...] = ()

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SummaryRule":
        sources = _get(d, "sources", "instruments", default=())
        if not isinstance(sources, (list, tuple)):
            sources = ()
        return cls(
            mode=_str(_get(d, "mode")).strip().lower(),
            sources=tuple(_str(s) for s in sources),
            bands=parse_bands(_get(d, "bands")),
            percent_bands=parse_bands(_get(d, "percentBands", "percent_bands")),
        )


@dataclass(frozen=True)
class CompositeRule:
    mode: str
    percent_bands: Tuple[Band, ...] = ()

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CompositeRule":
        return cls(
            mode=_str(_get(d, "mode")).strip().lower(),
            percent_bands=parse_bands(_get(d, "percentBands", "percent_bands", "tiers")),
        )


@dataclass(frozen=True)
class Category:
    id: str
    title: str = ""
    instruments: Tuple[Instrument, ...] = ()
    subgroups: Tuple[SubGroup, ...] = ()
    summary: Optional[SummaryRule] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], index: int = 0) -> "Category":
        cid = _str(_get(d, "id", "key", default=f"category{index + 1}"))
        summary = _get(d, "summary")
        return cls(
            id=cid,
            title=_str(_get(d, "title", "label", default=cid)),
            instruments=parse_instruments(_get(d, "instruments")),
            subgroups=tuple(SubGroup.from_dict(s, i)
                            for i, s in enumerate(_dicts(_get(d, "subgroups", "subs")))),
            summary=SummaryRule.from_dict(summary) if isinstance(summary, Mapping) else None,
        )

    def all_instruments(self) -> List[Tuple[Optional[str], Instrument]]:
        """(sub-group key or None, instrument) in evaluation order."""
        out: List[Tuple[Optional[str], Instrument]] = [(None, i) for i in self.instruments]
        for sub in self.subgroups:
            out.extend((sub.key, i) for i in sub.instruments)
        return out


@dataclass(frozen=True)
class Schema:
    categories: Tuple[Category, ...] = ()
    overall: Optional[CompositeRule] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Schema":
        overall = _get(d, "overall", "composite")
        return cls(
            categories=tuple(Category.from_dict(c, i)
                             for i, c in enumerate(_dicts(_get(d, "categories")))),
            overall=CompositeRule.from_dict(overall) if isinstance(overall, Mapping) else None,
            meta={k: v for k, v in d.items() if k not in ("categories", "overall", "composite")},
        )
