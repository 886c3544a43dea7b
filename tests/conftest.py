from pathlib import Path
import sys
import pytest
import yaml

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from scopezero.core.models import EmissionFactor, JobType, MaterialRequirement, ParameterSet


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]

@pytest.fixture(scope="session")
def data_dir(repo_root: Path) -> Path:
    # bundled default dataset
    d = repo_root / "datasets" / "sme" / "default"
    if not d.exists():
        pytest.skip("datasets/sme/default directory not found; skipping data-dependent tests.")
    return d

@pytest.fixture(scope="session")
def yload():
    def _load(p: Path):
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    return _load

@pytest.fixture
def params() -> ParameterSet:
    return ParameterSet()

@pytest.fixture
def job_types():
    return (
        JobType("quick_lighting_fix", share=0.7, legs_per_job=2, avg_one_way_km=10, detour_factor=1.15, revisit_rate=0.1),
        JobType("panel_fault_diagnosis", share=0.3, legs_per_job=2, avg_one_way_km=22, detour_factor=1.25, revisit_rate=0.2),
    )

@pytest.fixture
def materials():
    return (
        MaterialRequirement("quick_lighting_fix", "LED_lamp_A19", "unit", 0.5),
        MaterialRequirement("quick_lighting_fix", "Small_spares_misc", "unit", 1),
        MaterialRequirement("panel_fault_diagnosis", "Ballast_or_driver", "unit", 0.3),
    )

@pytest.fixture
def factors():
    return (
        EmissionFactor("fuel", "diesel_combustion", "litre", 2.68, "S1"),
        EmissionFactor("energy", "natural_gas_combustion", "kWh", 0.1829, "S1"),
        EmissionFactor("electricity", "grid_location_based", "kWh", 0.05, "S2"),
        EmissionFactor("f_gases", "R410A_GWP100", "kg_leaked", 2088, "S1"),
        EmissionFactor("transport", "employee_commute_avg", "km", 0.18, "S3"),
        EmissionFactor("purchased_goods", "LED_lamp_A19", "unit", 0, "S3"),
        EmissionFactor("purchased_goods", "Ballast_or_driver", "unit", 0, "S3"),
        EmissionFactor("purchased_goods", "Small_spares_misc", "unit", 0, "S3"),
    )
