import pytest

from scopezero.core.activities import build_activities, build_core_activities, build_material_activities
from scopezero.core.jobs import expand_job_mix
from scopezero.core.models import MaterialRequirement, ParameterSet


def test_core_activities_quantities_and_rounding(params, job_types):
    exp = expand_job_mix(params, job_types)
    acts = {a.activity_id: a for a in build_core_activities(params, exp)}
    assert list(acts) == ["A1", "A2", "A3", "A4", "A5"]
    assert acts["A1"].quantity == pytest.approx(5176.4)   # litres, 1 dp
    assert acts["A2"].quantity == 2500                     # 50 m² × 50 kWh/m²
    assert acts["A3"].quantity == 4500                     # 50 m² × 90 kWh/m²
    assert acts["A4"].quantity == pytest.approx(0.1)       # 2 kg × 5%
    assert acts["A5"].quantity == 27600                    # 4 FTE × 30 km × 230 d
    assert acts["A1"].key == ("fuel", "diesel_combustion", "litre")
    assert acts["A4"].unit == "kg_leaked"
    assert all(a.period == "2024" for a in acts.values())


def test_material_activities_use_job_counts(params, job_types, materials):
    exp = expand_job_mix(params, job_types)
    rows = build_material_activities(params, exp, materials)
    assert [r.activity_id for r in rows] == ["PG100", "PG101", "PG102"]
    assert [r.quantity for r in rows] == pytest.approx([483.0, 966.0, 124.2])
    assert all(r.category == "purchased_goods" for r in rows)
    assert rows[2].notes == "job_type=panel_fault_diagnosis"


def test_unknown_job_type_is_skipped_without_using_an_id(params, job_types):
    exp = expand_job_mix(params, job_types)
    mats = [
        MaterialRequirement("no_such_job", "Widget", "unit", 3),
        MaterialRequirement("quick_lighting_fix", "LED_lamp_A19", "", 0.5),
    ]
    rows = build_material_activities(params, exp, mats)
    assert len(rows) == 1
    assert rows[0].activity_id == "PG100"
    assert rows[0].unit == "unit"


def test_build_activities_ids_are_unique(params, job_types, materials):
    exp = expand_job_mix(params, job_types)
    acts = build_activities(params, exp, materials)
    ids = [a.activity_id for a in acts]
    assert len(ids) == len(set(ids)) == 8


def test_garbage_parameters_do_not_raise(job_types):
    params = ParameterSet(office_m2="big", refrigerant_charge_kg=float("nan"), employees_fte=None)
    exp = expand_job_mix(params, job_types)
    acts = {a.activity_id: a for a in build_core_activities(params, exp)}
    assert acts["A2"].quantity == 0
    assert acts["A4"].quantity == 0
    assert acts["A5"].quantity == 0


def test_huge_refrigerant_charge_does_not_overflow(job_types):
    params = ParameterSet(refrigerant_charge_kg=1e307, leak_rate_frac=1)
    exp = expand_job_mix(params, job_types)
    acts = {a.activity_id: a for a in build_core_activities(params, exp)}
    assert acts["A4"].quantity == 1e307
