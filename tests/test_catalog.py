"""StepCatalog loading and flow validation tests.

Validates that the bundled catalog loads both flows with the expected shape,
and that structurally broken flows are rejected at load time.

Expected shape:
    full    — 10 steps, safety gate first, photo collector last
    compact — 6 steps, same bookends
"""

import textwrap

import pytest

from leak_intake.catalog import StepCatalog
from leak_intake.models.answers import FIELD_ENUMS
from leak_intake.models.step import BooleanSetStep, PhotoStep


# =====================================================================
# Bundled catalog
# =====================================================================


def test_catalog_loads_both_flows(catalog):
    assert set(catalog.flows) == {"full", "compact"}
    assert len(catalog.get_flow("full")) == 10
    assert len(catalog.get_flow("compact")) == 6


@pytest.mark.parametrize("flow", ["full", "compact"])
def test_flow_bookends(catalog, flow):
    """Every flow starts at the safety gate and ends at the photo step."""
    steps = catalog.get_flow(flow)
    assert isinstance(steps[0], BooleanSetStep)
    assert steps[0].field == "hazard_checks"
    assert len(steps[0].options) >= 3
    assert isinstance(steps[-1], PhotoStep)


def test_option_ids_belong_to_closed_sets(catalog):
    for field, options in catalog.labels.items():
        if field not in FIELD_ENUMS:
            continue
        allowed = {e.value for e in FIELD_ENUMS[field]}
        assert {o.id for o in options} == allowed, f"{field} labels do not cover its closed set"


def test_label_lookup(catalog):
    assert catalog.label("location", "CEILING") == "천장"
    # Unknown ids fall back to the id itself
    assert catalog.label("location", "BASEMENT") == "BASEMENT"


def test_unknown_flow_raises_key_error(catalog):
    with pytest.raises(KeyError):
        catalog.get_flow("express")


# =====================================================================
# Validation of broken flows
# =====================================================================

_LABELS = textwrap.dedent("""\
    hazard_checks:
      - {id: EXPOSED_WIRING, label: a}
      - {id: SAGGING_CEILING, label: b}
      - {id: BREAKER_TRIPPING, label: c}
    location:
      - {id: CEILING, label: ceiling}
      - {id: WALL, label: wall}
""")

_SAFETY = textwrap.dedent("""\
    - step_id: safety
      kind: boolean_set
      field: hazard_checks
      title: safety
""")

_PHOTOS = textwrap.dedent("""\
    - step_id: photos
      kind: photo_collector
      field: photos
      title: photos
""")

_LOCATION = textwrap.dedent("""\
    - step_id: location
      kind: single_select
      field: location
      title: where
      auto_advance: true
""")


def _write_catalog(tmp_path, flow_yaml, labels=_LABELS):
    (tmp_path / "flows").mkdir()
    (tmp_path / "labels.yaml").write_text(labels, encoding="utf-8")
    (tmp_path / "flows" / "custom.yaml").write_text(flow_yaml, encoding="utf-8")
    return StepCatalog(catalog_dir=tmp_path)


def test_custom_catalog_dir_loads(tmp_path):
    c = _write_catalog(tmp_path, _SAFETY + _LOCATION + _PHOTOS)
    c.load()
    steps = c.get_flow("custom")
    assert [s.step_id for s in steps] == ["safety", "location", "photos"]
    # Options are filled in from labels.yaml
    assert [o.id for o in steps[1].options] == ["CEILING", "WALL"]


def test_flow_must_start_with_safety_gate(tmp_path):
    c = _write_catalog(tmp_path, _LOCATION + _SAFETY + _PHOTOS)
    with pytest.raises(ValueError, match="safety gate"):
        c.load()


def test_flow_must_end_with_photo_step(tmp_path):
    c = _write_catalog(tmp_path, _SAFETY + _PHOTOS + _LOCATION)
    with pytest.raises(ValueError, match="photo_collector"):
        c.load()


def test_safety_gate_needs_three_checks(tmp_path):
    labels = _LABELS.replace("  - {id: BREAKER_TRIPPING, label: c}\n", "")
    c = _write_catalog(tmp_path, _SAFETY + _PHOTOS, labels=labels)
    with pytest.raises(ValueError, match="at least 3"):
        c.load()


def test_field_bound_twice_is_rejected(tmp_path):
    second = _LOCATION.replace("step_id: location", "step_id: location_again")
    c = _write_catalog(tmp_path, _SAFETY + _LOCATION + second + _PHOTOS)
    with pytest.raises(ValueError, match="more than once"):
        c.load()


def test_unknown_option_id_is_rejected(tmp_path):
    labels = _LABELS + "  - {id: BASEMENT, label: basement}\n"
    c = _write_catalog(tmp_path, _SAFETY + _LOCATION + _PHOTOS, labels=labels)
    with pytest.raises(ValueError, match="unknown option ids"):
        c.load()


def test_missing_labels_file(tmp_path):
    (tmp_path / "flows").mkdir()
    with pytest.raises(FileNotFoundError):
        StepCatalog(catalog_dir=tmp_path).load()


def test_options_in_presentation_order(catalog):
    assert [o.id for o in catalog.options("building_age")] == [
        "UNDER_10", "BETWEEN_10_20", "OVER_20", "UNKNOWN",
    ]
    assert catalog.options("favourite_colour") == []
