"""Minimal CLI to run both ScopeZero pipelines on a dataset.

Examples
  python -m scopezero.cli.engine_cli --data datasets/sme/default
  python -m scopezero.cli.engine_cli --country Australia --region VIC --employees 25
  python -m scopezero.cli.engine_cli --method per_employee --out results/demo
"""
from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path

from scopezero.core.io import Dataset, load_dataset
from scopezero.core.runner import CoreResults, CoreScenario, run_core_scenario, run_scope2_scenario
from scopezero.core.models import Scope2Defaults, Scope2Inputs, Scope2Result
from scopezero.core.scope2 import (
    METHOD_ORDER,
    effective_kwh_per_currency,
    effective_kwh_per_employee,
    effective_kwh_per_m2,
)
from scopezero.reporting.export import (
    activities_frame,
    expansion_frame,
    factors_frame,
    line_items_frame,
    scenario_frame,
    scope_frame,
    write_csv,
)


def build_core_scenario(ds: Dataset) -> CoreScenario:
    return CoreScenario(
        params=ds.params,
        job_types=tuple(ds.job_types),
        materials=tuple(ds.materials),
        factors=tuple(ds.factors),
    )


def build_scope2_inputs(base: Scope2Inputs, args: argparse.Namespace, defaults: Scope2Defaults) -> Scope2Inputs:
    """Dataset defaults with any CLI flags applied on top.

    Override mode replaces all three intensities, so the ones not given on the
    command line are pinned to their current defaults.
    """
    changes = {}
    for name in ("country", "region", "employees", "revenue", "floorspace_m2", "building_type", "direct_kwh"):
        value = getattr(args, name, None)
        if value is not None:
            changes[name] = value
    overrides = {
        "override_kwh_per_employee": args.kwh_per_employee,
        "override_kwh_per_currency": args.kwh_per_currency,
        "override_kwh_per_m2": args.kwh_per_m2,
    }
    if any(v is not None for v in overrides.values()):
        current = replace(base, use_overrides=False, **changes)
        pinned = {
            "override_kwh_per_employee": effective_kwh_per_employee(current, defaults),
            "override_kwh_per_currency": effective_kwh_per_currency(current, defaults),
            "override_kwh_per_m2": effective_kwh_per_m2(current, defaults),
        }
        changes["use_overrides"] = True
        changes.update({k: pinned[k] if v is None else v for k, v in overrides.items()})
    if args.method:
        changes["locked_method"] = args.method
    if args.method or args.no_auto:
        changes["auto_mode"] = False
    return replace(base, **changes)


def print_core_summary(out: CoreResults) -> None:
    print("=== Activity-based Summary ===")
    print(f"Year: {out.meta.get('year')}  Jobs/year: {out.expansion.total_jobs}")
    print(f"Total CO2e (t): {out.total_tco2e:.3f}")
    print("Scope split:")
    for scope, t in out.summary.scope_breakdown:
        print(f"  {scope or '(no scope)':12s} {t:,.3f} t")
    if out.summary.unresolved:
        print(f"No emission factor for: {', '.join(out.summary.unresolved)}")
    m = out.metrics
    print(f"tCO2e per job: {m.tco2e_per_job:.4f}  km/job: {m.km_per_job:.2f}  L/job: {m.litres_per_job:.3f}")


def print_scope2_summary(res: Scope2Result) -> None:
    print("=== Scope 2 Estimate ===")
    print(f"Grid factor: {res.grid.ef:.3f} kgCO2e/kWh ({res.grid.source})")
    kwh = f"{res.kwh:,.0f}" if res.kwh is not None else "n/a"
    kg = f"{res.emissions_kgco2e:,.0f}" if res.emissions_kgco2e is not None else "n/a"
    print(f"Method: {res.method or 'n/a'}  kWh: {kwh}  Emissions (kgCO2e): {kg}")
    print(f"Confidence: {round(res.confidence.score * 100)}%")
    for flag in res.confidence.flags:
        print(f"  ! {flag}")
    if res.comparison:
        print("Scenario comparison:")
        for row in res.comparison:
            print(f"  {row.method:14s} {row.kwh:>12,.0f} kWh  {row.emissions_kgco2e:>12,.0f} kgCO2e  ({row.label})")


def write_outputs(out_dir: Path, ds: Dataset, core: CoreResults, scope2: Scope2Result) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    write_csv(expansion_frame(core.expansion), out_dir / "job_type_expansion.csv")
    write_csv(activities_frame(core.activities), out_dir / "activity_data.csv")
    write_csv(factors_frame(ds.factors), out_dir / "emission_factors.csv")
    write_csv(line_items_frame(core.line_items), out_dir / "merged_line_items.csv")
    write_csv(scope_frame(core.summary), out_dir / "scope_split.csv")
    write_csv(scenario_frame(scope2.comparison), out_dir / "scope2_scenarios.csv")

    manifest = {
        "data": str(ds.path.resolve()),
        "year": core.meta.get("year"),
        "total_tco2e": core.total_tco2e,
        "scope2_method": scope2.method,
        "scope2_kwh": scope2.kwh,
        "scope2_kgco2e": scope2.emissions_kgco2e,
        "grid_source": scope2.grid.source,
        "confidence": scope2.confidence.score,
    }
    (out_dir / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Estimate emissions for a dataset and print a summary")
    p.add_argument("--data", default=None, help="Dataset directory (default: $SCOPEZERO_DATA_DIR or bundled defaults)")
    p.add_argument("--country", default=None, help="Grid country name (e.g., 'Spain', 'Australia')")
    p.add_argument("--region", default=None, help="Sub-national region where the country supports it (e.g., VIC)")
    p.add_argument("--employees", type=float, default=None)
    p.add_argument("--revenue", type=float, default=None, help="Revenue / value added (currency units)")
    p.add_argument("--floorspace", dest="floorspace_m2", type=float, default=None, help="Floor area (m²)")
    p.add_argument("--building", dest="building_type", default=None, help="Building type for the area benchmark")
    p.add_argument("--kwh", dest="direct_kwh", type=float, default=None, help="Metered annual electricity (kWh)")
    p.add_argument("--kwh-per-employee", type=float, default=None, help="Override kWh per employee")
    p.add_argument("--kwh-per-currency", type=float, default=None, help="Override kWh per currency unit")
    p.add_argument("--kwh-per-m2", type=float, default=None, help="Override kWh per m²")
    p.add_argument("--method", choices=METHOD_ORDER, default=None, help="Lock the Scope 2 method (implies --no-auto)")
    p.add_argument("--no-auto", action="store_true", help="Disable automatic method selection")
    p.add_argument("--out", default=None, help="Output directory for CSVs (skipped when omitted)")
    args = p.parse_args(argv)

    ds = load_dataset(args.data)
    core = run_core_scenario(build_core_scenario(ds))
    scope2 = run_scope2_scenario(build_scope2_inputs(ds.scope2_inputs, args, ds.scope2_defaults), ds.grids, ds.scope2_defaults)

    print_core_summary(core)
    print()
    print_scope2_summary(scope2)

    if args.out:
        out_dir = Path(args.out)
        write_outputs(out_dir, ds, core, scope2)
        print(f"Wrote outputs to: {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
