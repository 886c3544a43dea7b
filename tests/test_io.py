import glob
import pathlib

import pytest

from scopezero.core.io import (
    DATA_DIR_ENV,
    default_data_dir,
    load_dataset,
    load_emission_factors,
    load_grid_factors,
    load_job_types,
    load_parameters,
    safe_yaml_load,
    scope2_inputs_from_mapping,
)
from scopezero.core.factors import merge_with_factors
from scopezero.core.models import ActivityRecord, NationalGrid, RegionalGrid


def test_all_dataset_yaml_files_parse(data_dir, yload):
    paths = glob.glob(str(data_dir / "*.yml"))
    assert paths
    for p in paths:
        doc = yload(pathlib.Path(p))
        assert isinstance(doc, (dict, list)), f"{p} did not parse to dict/list"


def test_load_default_dataset(data_dir):
    ds = load_dataset(data_dir)
    assert ds.params.total_jobs_per_year == 1380
    assert ds.params.year == "2024"
    assert [jt.job_type for jt in ds.job_types] == ["quick_lighting_fix", "panel_fault_diagnosis"]
    assert len(ds.materials) == 3
    assert len(ds.factors) == 8
    assert isinstance(ds.grids["Australia"], RegionalGrid)
    assert ds.grids["Australia"].regions["VIC"] == pytest.approx(0.77)
    assert isinstance(ds.grids["Spain"], NationalGrid)
    assert ds.scope2_defaults.kwh_per_currency["Spain"] is None
    assert ds.scope2_defaults.area_benchmarks["office"] == 95
    assert ds.scope2_inputs.employees == 10


def test_missing_dataset_dir_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / "nope")


def test_empty_dataset_dir_loads_defaults(tmp_path):
    ds = load_dataset(tmp_path)
    assert ds.params.total_jobs_per_year == 1380
    assert ds.job_types == []
    assert ds.grids == {}


def test_safe_yaml_load_returns_default(tmp_path):
    assert safe_yaml_load(tmp_path / "missing.yml", default={"a": 1}) == {"a": 1}
    bad = tmp_path / "bad.yml"
    bad.write_text("a: [1, 2\n", encoding="utf-8")
    assert safe_yaml_load(bad, default=[]) == []


def test_parameters_bad_values_take_defaults(tmp_path):
    p = tmp_path / "parameters.yml"
    p.write_text("year: 2025\ntotal_jobs_per_year: many\noffice_m2: 80\n", encoding="utf-8")
    params = load_parameters(p)
    assert params.year == "2025"
    assert params.total_jobs_per_year == 1380
    assert params.office_m2 == 80


def test_job_type_without_key_is_rejected(tmp_path):
    p = tmp_path / "job_types.yml"
    p.write_text("job_types:\n  - share: 0.5\n", encoding="utf-8")
    with pytest.raises(ValueError, match="job_type"):
        load_job_types(p)


def test_regions_must_be_a_mapping(tmp_path):
    p = tmp_path / "grid_factors.yml"
    p.write_text("countries:\n  - name: X\n    ef: 0.3\n    regions: [A, B]\n", encoding="utf-8")
    with pytest.raises(ValueError, match="regions"):
        load_grid_factors(p)


def test_blank_factor_value_is_treated_as_unknown(tmp_path):
    p = tmp_path / "emission_factors.yml"
    p.write_text(
        "emission_factors:\n"
        "  - {category: fuel, item: petrol, unit: litre, ef_kgco2e_per_unit: null, scope: S1}\n",
        encoding="utf-8",
    )
    factors = load_emission_factors(p)
    li = merge_with_factors([ActivityRecord("A", "fuel", "petrol", 10, "litre", "Fleet", "2024")], factors)[0]
    assert li.emissions_tco2e is None


def test_default_data_dir_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    assert default_data_dir() == tmp_path
    monkeypatch.delenv(DATA_DIR_ENV)
    assert default_data_dir().parts[-3:] == ("datasets", "sme", "default")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("false", False),
        ("No", False),
        ("0", False),
        ("", False),
        (" yes ", True),
        ("TRUE", True),
        ("1", True),
        (False, False),
        (1, True),
    ],
)
def test_scope2_flags_read_from_text(raw, expected):
    inputs = scope2_inputs_from_mapping({"use_overrides": raw, "auto_mode": raw})
    assert inputs.use_overrides is expected
    assert inputs.auto_mode is expected


def test_scope2_unreadable_flags_keep_defaults():
    inputs = scope2_inputs_from_mapping({"use_overrides": "maybe", "auto_mode": "sometimes"})
    assert inputs.use_overrides is False
    assert inputs.auto_mode is True


def test_quoted_false_in_yaml_disables_auto_mode(tmp_path):
    from scopezero.core.io import load_scope2_inputs

    p = tmp_path / "scope2.yml"
    p.write_text('scope2:\n  auto_mode: "false"\n  use_overrides: "no"\n  locked_method: area\n', encoding="utf-8")
    inputs = load_scope2_inputs(p)
    assert inputs.auto_mode is False
    assert inputs.use_overrides is False
    assert inputs.locked_method == "area"


def test_huge_integer_parameter_takes_default(tmp_path):
    p = tmp_path / "parameters.yml"
    p.write_text("office_m2: 1" + "0" * 400 + "\n", encoding="utf-8")
    assert load_parameters(p).office_m2 == 50.0
