import json

import pandas as pd
import pytest
import yaml

from scoring.schema import InstrumentType
from utils.errors import SchemaLoadError
from utils.registry import (
    Lookup,
    list_categories,
    load_lookup,
    load_schema,
    load_schema_dict,
    lookup_from_frame,
    validate_lookup_keys,
)


def test_bundled_schema_loads(bundled_schema_path):
    schema = load_schema(bundled_schema_path)
    ids = [c.id for c in schema.categories]
    assert ids == ["personal", "social", "sensory", "meds", "microplastics", "toxins", "foods"]
    assert schema.overall.mode == "percent"
    assert schema.meta["title"] == "Brain Threat Analysis"

    types = {i.type for c in schema.categories for _, i in c.all_instruments()}
    assert InstrumentType.UNSUPPORTED not in types


def test_list_categories_includes_subgroup_instruments(bundled_schema_path):
    cats = {c["id"]: c for c in list_categories(load_schema(bundled_schema_path))}
    assert cats["sensory"]["instruments"] == ["hhies", "vfq"]
    assert cats["sensory"]["title"] == "Sensory Assessment"


def test_yaml_schema(tmp_path, mini_schema):
    p = tmp_path / "schema.yaml"
    p.write_text(yaml.safe_dump(mini_schema), encoding="utf-8")
    assert load_schema_dict(p) == mini_schema
    assert [c.id for c in load_schema(p).categories] == ["personal", "exposures"]


def test_unsupported_suffix(tmp_path):
    p = tmp_path / "schema.toml"
    p.write_text("x = 1", encoding="utf-8")
    with pytest.raises(SchemaLoadError, match="Unsupported schema format"):
        load_schema_dict(p)


def test_missing_file(tmp_path):
    with pytest.raises(SchemaLoadError, match="not found"):
        load_schema_dict(tmp_path / "nope.json")


def test_broken_json(tmp_path):
    p = tmp_path / "schema.json"
    p.write_text("{ categories: ", encoding="utf-8")
    with pytest.raises(SchemaLoadError, match="load failed"):
        load_schema_dict(p)


def test_non_mapping_root(tmp_path):
    p = tmp_path / "schema.json"
    p.write_text(json.dumps([{"id": "a"}]), encoding="utf-8")
    with pytest.raises(SchemaLoadError, match="must be an object"):
        load_schema_dict(p)


def test_empty_categories_only_warns(tmp_path, caplog):
    p = tmp_path / "schema.json"
    p.write_text(json.dumps({"categories": []}), encoding="utf-8")
    assert load_schema_dict(p) == {"categories": []}
    assert "no categories" in caplog.text


def test_bundled_lookup(bundled_lookup_path):
    lookup = load_lookup(bundled_lookup_path)
    assert "lorazepam" in lookup
    assert " Lorazepam " in lookup
    assert lookup.brand("lorazepam") == "Ativan"
    assert lookup.threat("pesticides")
    assert lookup.threat("unknown") == ""


def test_lookup_missing_columns():
    df = pd.DataFrame({"item_key": ["a"], "threat": ["x"]})
    with pytest.raises(SchemaLoadError, match="instrument_id, brand_name"):
        lookup_from_frame(df, source="master.csv")


def test_lookup_skips_blank_keys():
    df = pd.DataFrame({
        "instrument_id": ["t", "t"],
        "item_key": ["  Mold ", ""],
        "threat": ["Mycotoxins", "orphan"],
        "brand_name": ["", ""],
    })
    lookup = lookup_from_frame(df)
    assert lookup.threat_by_key == {"mold": "Mycotoxins"}


def test_bundled_lookup_covers_every_csv_key(bundled_schema_path, bundled_lookup_path):
    schema = load_schema(bundled_schema_path)
    assert validate_lookup_keys(schema, load_lookup(bundled_lookup_path)) == []


def test_missing_lookup_keys_are_reported(bundled_schema_path):
    schema = load_schema(bundled_schema_path)
    lookup = Lookup(threat_by_key={"pesticides": "Neurotoxic organophosphates"})
    warnings = validate_lookup_keys(schema, lookup)
    assert "Medication Threat Assessment / Medication Threat: lorazepam" in warnings
    assert not any(w.endswith(": pesticides") for w in warnings)
