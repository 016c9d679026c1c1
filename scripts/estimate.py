#!/usr/bin/env python3
"""
Command line front end for the estimation calculator.

Sub-commands:
  models    COCOMO II / SLIM / RCA for one set of project parameters
  features  feature-level FPA, PERT and story point estimates from a JSON file
  pert      PERT network schedule (sample chain or a JSON task file)
  evm       earned value metrics; inputs are persisted in the database

Usage:
    python3 scripts/estimate.py models --size 80 --complexity high
    python3 scripts/estimate.py features features.json --export out.xlsx
    python3 scripts/estimate.py pert --sample
    python3 scripts/estimate.py pert tasks.json --order
    python3 scripts/estimate.py evm --ev 600000 --ac 590000
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _load_json(path: str):
    with open(path) as f:
        return json.load(f)


def _print_table(headers: list[str], rows: list[list]) -> None:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))
    print("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print("  ".join(str(c).ljust(widths[i]) for i, c in enumerate(row)))


def cmd_models(args, config) -> int:
    from estimation_services import ProjectEstimator, export_estimation_workbook

    estimator = ProjectEstimator.from_config(config)
    changes = {}
    if args.size is not None:
        changes["project_size"] = args.size
    if args.team is not None:
        changes["team_size"] = args.team
    if args.timeline is not None:
        changes["timeline"] = args.timeline
    if args.complexity is not None:
        changes["complexity"] = args.complexity
    if changes:
        estimator.update(**changes)

    rows = [
        [name, f"{r.cost:,.0f}", f"{r.effort:.1f}", f"{r.duration:.1f}", r.risk.value]
        for name, r in estimator.results.items()
    ]
    _print_table(["model", "cost", "effort (PM)", "duration (mo)", "risk"], rows)
    print(f"\nRecommended model: {estimator.recommended_model.value}")

    if args.export:
        export_estimation_workbook(
            args.export,
            model_results=estimator.results,
            recommended_model=estimator.recommended_model,
        )
        print(f"Exported to {args.export}")
    return 0


def cmd_features(args, config) -> int:
    from estimation_kernel.domain import FeatureInput
    from estimation_services import FeaturePlanner, export_estimation_workbook

    features = [FeatureInput.from_dict(item) for item in _load_json(args.file)]
    planner = FeaturePlanner.from_config(config, features)

    rows = []
    for est in planner.estimations:
        rows.append([
            est.feature_name or est.feature_id,
            est.fpa.cost if est.fpa else "-",
            est.pert.cost if est.pert else "-",
            est.story_points.cost if est.story_points else "-",
        ])
    _print_table(["feature", "fpa cost", "pert cost", "story point cost"], rows)

    agg = planner.aggregate
    print()
    _print_table(
        ["model", "effort", "cost", "duration"],
        [
            ["fpa", agg.fpa.total_effort, agg.fpa.total_cost, agg.fpa.total_duration],
            ["pert", agg.pert.total_effort, agg.pert.total_cost, agg.pert.total_duration],
            ["story points", agg.story_points.total_effort, agg.story_points.total_cost,
             agg.story_points.total_duration],
        ],
    )
    print(f"\nAverage PERT risk: {agg.pert.avg_risk.value}")

    if args.export:
        export_estimation_workbook(
            args.export,
            feature_estimations=planner.estimations,
            aggregate=agg,
        )
        print(f"Exported to {args.export}")
    return 0


def cmd_pert(args, config) -> int:
    from estimation_engines.pert_network import order_tasks
    from estimation_kernel.domain import PertTask
    from estimation_kernel.exceptions import EstimationKernelError
    from estimation_services import PertPlanner, export_estimation_workbook

    planner = PertPlanner()
    if args.sample:
        planner.load_sample_tasks()
    elif args.file:
        tasks = [PertTask.from_dict(item) for item in _load_json(args.file)]
        try:
            if args.order:
                tasks = order_tasks(tasks)
            planner = PertPlanner(tasks)
        except EstimationKernelError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    else:
        print("error: pass --sample or a task file", file=sys.stderr)
        return 2

    if planner.schedule is None:
        print(f"error: {planner.schedule_error}", file=sys.stderr)
        return 1

    schedule = planner.schedule
    rows = [
        [n.id, f"{n.es:.2f}", f"{n.ef:.2f}", f"{n.ls:.2f}", f"{n.lf:.2f}", f"{n.slack:.2f}",
         "*" if n.is_critical else ""]
        for n in schedule.nodes
    ]
    _print_table(["task", "es", "ef", "ls", "lf", "slack", "critical"], rows)
    print(f"\nTotal duration: {schedule.total_duration:.2f}")
    print(f"Critical path:  {' -> '.join(schedule.critical_path)}")
    print(f"Std deviation:  {schedule.critical_path_std_dev:.2f}")

    if args.export:
        export_estimation_workbook(
            args.export,
            pert_tasks=planner.tasks,
            pert_schedule=schedule,
        )
        print(f"Exported to {args.export}")
    return 0


def cmd_evm(args, config) -> int:
    import dataclasses

    from estimation_engines.evm import (
        format_currency,
        format_decimal,
        get_health_score,
        get_health_status,
        get_performance_status,
    )
    from estimation_kernel.db.engine import create_tables, init_engine_from_url, session_scope
    from estimation_kernel.services.kv_store import KeyValueStore
    from estimation_services import EVMDataService, export_estimation_workbook

    init_engine_from_url(args.db_url or config.storage.database_url)
    create_tables()

    with session_scope() as session:
        service = EVMDataService.from_config(KeyValueStore(session), config)
        data = service.load()
        changes = {k: getattr(args, k) for k in ("bac", "pv", "ev", "ac") if getattr(args, k) is not None}
        if changes:
            data = dataclasses.replace(data, **changes)
            service.update(data)
        metrics = service.metrics

    score = get_health_score(metrics.cpi, metrics.spi)
    print(f"CPI: {format_decimal(metrics.cpi)} ({get_performance_status(metrics.cpi)})")
    print(f"SPI: {format_decimal(metrics.spi)} ({get_performance_status(metrics.spi)})")
    print(f"CV:  {format_currency(metrics.cv)}")
    print(f"SV:  {format_currency(metrics.sv)}")
    print(f"EAC: {format_currency(metrics.eac)}")
    print(f"VAC: {format_currency(metrics.vac)}")
    print(f"Complete: {metrics.percent_complete:.1f}%")
    print(f"Health: {score} ({get_health_status(score)})")

    if args.export:
        export_estimation_workbook(args.export, evm_data=data)
        print(f"Exported to {args.export}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Project cost estimation calculator")
    parser.add_argument("--config", help="Path to an estimation YAML config")
    parser.add_argument("--export", metavar="PATH", help="Write results to an .xlsx workbook")
    parser.add_argument("--log-level", default="WARNING",
                        help="Structured log level written to stderr (default WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_models = sub.add_parser("models", help="Project-level model comparison")
    p_models.add_argument("--size", type=float, help="Project size in KLOC")
    p_models.add_argument("--team", type=float, help="Team size")
    p_models.add_argument("--timeline", type=float, help="Timeline in months")
    p_models.add_argument("--complexity", choices=["low", "medium", "high"])
    p_models.set_defaults(func=cmd_models)

    p_features = sub.add_parser("features", help="Feature-level estimates")
    p_features.add_argument("file", help="JSON list of features")
    p_features.set_defaults(func=cmd_features)

    p_pert = sub.add_parser("pert", help="PERT network schedule")
    p_pert.add_argument("file", nargs="?", help="JSON list of tasks")
    p_pert.add_argument("--sample", action="store_true", help="Use the five-task sample chain")
    p_pert.add_argument("--order", action="store_true",
                        help="Sort tasks into dependency order before solving")
    p_pert.set_defaults(func=cmd_pert)

    p_evm = sub.add_parser("evm", help="Earned value metrics")
    for name in ("bac", "pv", "ev", "ac"):
        p_evm.add_argument(f"--{name}", type=float, help=f"New {name.upper()} value to store")
    p_evm.add_argument("--db-url", help="Database URL (defaults to the configured one)")
    p_evm.set_defaults(func=cmd_evm)

    args = parser.parse_args()

    from estimation_config import get_active_config
    from estimation_kernel.logging_config import configure_logging

    configure_logging(level=getattr(logging, args.log_level.upper(), logging.WARNING), stream=sys.stderr)
    config = get_active_config(args.config)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
