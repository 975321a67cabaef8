import logging

from scoring.dispatch import SCORERS, evaluate_instrument
from scoring.schema import Instrument, InstrumentType


class Boom:
    def score(self, instrument, answers):
        raise ValueError("bad node")


def test_unknown_type_is_unsupported(caplog):
    node = {"id": "vas", "title": "Visual Analog Scale", "type": "visual_analog", "items": [{"key": "a"}]}
    with caplog.at_level(logging.WARNING, logger="scoring.dispatch"):
        r = evaluate_instrument(node, {"vas.a": 2})
    assert r.type == "unsupported"
    assert not r.supported
    assert r.total is None
    assert "visual_analog" in r.note
    assert r.band.empty
    assert "unsupported instrument type" in caplog.text


def test_missing_type_is_unsupported():
    r = evaluate_instrument({"id": "x", "items": []}, {})
    assert r.type == "unsupported"
    assert "(missing)" in r.note


def test_non_mapping_instrument_node():
    inst = Instrument.from_dict("not-an-instrument", 2)
    assert inst.type is InstrumentType.UNSUPPORTED
    assert inst.id == "instrument3"
    assert evaluate_instrument(inst, {}).type == "unsupported"


def test_type_aliases():
    assert InstrumentType.parse("yes-no-list") is InstrumentType.YN_LIST
    assert InstrumentType.parse("Weighted-Select") is InstrumentType.WEIGHTED_SELECT
    assert InstrumentType.parse("single-choice-radio") is InstrumentType.RADIO
    assert InstrumentType.parse("medication-classes") is InstrumentType.MEDICATIONS
    assert InstrumentType.parse("demographic") is InstrumentType.DEMOGRAPHICS
    assert InstrumentType.parse("VFQ-3-of-7") is InstrumentType.VFQ_ROUTED
    assert InstrumentType.parse(None) is InstrumentType.UNSUPPORTED


def test_registry_covers_every_supported_type():
    assert set(SCORERS) == set(InstrumentType) - {InstrumentType.UNSUPPORTED}


def test_scorer_failure_is_isolated(monkeypatch, stress_instrument):
    monkeypatch.setitem(SCORERS, InstrumentType.LIKERT, Boom())
    r = evaluate_instrument(stress_instrument, {"stress.s1": 1})
    assert r.type == "unsupported"
    assert "bad node" in r.note
    assert r.id == "stress"


def test_dispatch_accepts_raw_response_map(stress_instrument):
    r = evaluate_instrument(stress_instrument, {"s1": "2", "stress.s4": 1})
    assert r.type == "likert"
    assert r.total == 3


def test_vfq_with_wrong_item_count_is_unsupported():
    node = {"id": "vfq", "type": "vfq_routed", "items": [{"key": "v1"}]}
    r = evaluate_instrument(node, {"vfq.v1": 3})
    assert r.type == "unsupported"
    assert "7 items" in r.note
