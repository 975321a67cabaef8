import pandas as pd

from scoring import evaluate
from utils.export import build_row, results_frame, to_csv_bytes
from utils.registry import load_schema


def test_build_row(mini_schema):
    result = evaluate(mini_schema, {"toxins.q1": 3, "toxins.q2": 3, "foods.q1": 3})
    row = build_row("2026-01-01 10:00:00", "P-001", result)
    assert row["timestamp"] == "2026-01-01 10:00:00"
    assert row["participant_id"] == "P-001"
    assert row["toxins_total"] == 6
    assert row["toxins_max"] == 12
    assert row["toxins_pct"] == 50
    assert row["toxins_band"] == "High"
    assert row["stress_total"] == 0
    assert row["stress_band"] == ""
    assert "stress_pct" not in row
    assert row["exposures_summary"] == 43
    assert row["exposures_summary_band"] == "Moderate"
    assert "personal_summary" not in row
    assert row["overall_pct"] == 43


def test_build_row_without_overall(mini_schema):
    del mini_schema["overall"]
    row = build_row("t", "p", evaluate(mini_schema, {}))
    assert "overall_pct" not in row


def test_results_frame(mini_schema):
    df = results_frame(evaluate(mini_schema, {"stress.s1": 2}))
    assert list(df["instrument"]) == ["stress", "toxins", "foods"]
    assert list(df["category"]) == ["personal", "exposures", "exposures"]
    assert df.loc[0, "total"] == 2
    assert df.loc[0, "answered"] == 1


def test_results_frame_empty():
    df = results_frame(evaluate({"categories": []}, {}))
    assert df.empty
    assert "band" in df.columns


def test_csv_bytes_have_bom():
    data = to_csv_bytes(pd.DataFrame([{"a": 1, "b": "Ünïcode"}]))
    assert data.startswith(b"\xef\xbb\xbf")
    assert data.decode("utf-8-sig").splitlines() == ["a,b", "1,Ünïcode"]


def test_build_row_carries_vision_score(bundled_schema_path):
    schema = load_schema(bundled_schema_path)
    row = build_row("t", "p", evaluate(schema, {"vfq.v1": 2, "vfq.v3": 2, "vfq.v7": 2}))
    assert row["vfq_score"] == 42.3
    assert row["vfq_total"] == 57.7
    assert row["sensory_summary_band"] == "Moderate"
