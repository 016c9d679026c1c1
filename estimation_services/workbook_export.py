"""
estimation_services.workbook_export -- Spreadsheet export of calculator results.

Writes an ``.xlsx`` workbook with one sheet per result family:

    Models          COCOMO II / SLIM / RCA comparison plus the recommendation
    Features        per-feature FPA, PERT and story point results plus totals
    PERT Schedule   ES/EF/LS/LF/slack per task and the critical path
    EVM             the four inputs and every derived index

Sections whose inputs are not supplied are left out.  The export reads
already computed values only; it never recomputes an estimate.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from estimation_engines.evm import (
    calculate_evm_metrics,
    get_health_score,
    get_health_status,
    get_performance_status,
)
from estimation_kernel.domain import (
    EstimationResult,
    EVMData,
    FeatureAggregate,
    FeatureEstimationResult,
    ModelName,
    PertSchedule,
    PertTask,
)
from estimation_kernel.logging_config import get_logger

logger = get_logger("services.workbook_export")

MODEL_LABELS = {
    ModelName.COCOMO.value: "COCOMO II",
    ModelName.SLIM.value: "SLIM",
    ModelName.RCA.value: "RCA Price",
}


def _write_models(wb, results: dict[str, EstimationResult], recommended: ModelName | None) -> None:
    ws = wb.create_sheet("Models")
    ws.append(["Model", "Cost (USD)", "Effort (PM)", "Duration (months)", "Risk", "Recommended"])
    for key, result in results.items():
        ws.append([
            MODEL_LABELS.get(key, key),
            result.cost,
            result.effort,
            result.duration,
            result.risk.value,
            "yes" if recommended is not None and recommended.value == key else "",
        ])


def _write_features(
    wb,
    estimations: Sequence[FeatureEstimationResult],
    aggregate: FeatureAggregate | None,
) -> None:
    ws = wb.create_sheet("Features")
    ws.append([
        "Feature",
        "FPA function points", "FPA effort (PD)", "FPA cost", "FPA duration",
        "PERT expected (PD)", "PERT std dev", "PERT risk", "PERT cost", "PERT duration",
        "SP sprints", "SP effort", "SP cost", "SP duration (days)",
    ])
    for est in estimations:
        row: list = [est.feature_name or est.feature_id]
        if est.fpa is not None:
            row += [est.fpa.function_points, est.fpa.effort, est.fpa.cost, est.fpa.duration]
        else:
            row += [None] * 4
        if est.pert is not None:
            row += [
                est.pert.expected_effort,
                est.pert.standard_deviation,
                est.pert.risk.value,
                est.pert.cost,
                est.pert.duration,
            ]
        else:
            row += [None] * 5
        if est.story_points is not None:
            sp = est.story_points
            row += [sp.sprints, sp.effort, sp.cost, sp.duration]
        else:
            row += [None] * 4
        ws.append(row)

    if aggregate is not None:
        ws.append([])
        ws.append(["Totals", "Effort", "Cost", "Duration"])
        ws.append(["FPA", aggregate.fpa.total_effort, aggregate.fpa.total_cost, aggregate.fpa.total_duration])
        ws.append([
            "PERT",
            aggregate.pert.total_effort,
            aggregate.pert.total_cost,
            aggregate.pert.total_duration,
            aggregate.pert.avg_risk.value,
        ])
        ws.append([
            "Story Points",
            aggregate.story_points.total_effort,
            aggregate.story_points.total_cost,
            aggregate.story_points.total_duration,
            aggregate.story_points.total_sprints,
        ])


def _write_schedule(wb, tasks: Sequence[PertTask], schedule: PertSchedule) -> None:
    ws = wb.create_sheet("PERT Schedule")
    ws.append(["Task", "Name", "Expected", "Variance", "ES", "EF", "LS", "LF", "Slack", "Critical"])
    names = {task.id: task for task in tasks}
    for node in schedule.nodes:
        task = names.get(node.id)
        ws.append([
            node.id,
            task.task_name if task else "",
            task.expected_time if task else None,
            task.variance if task else None,
            node.es,
            node.ef,
            node.ls,
            node.lf,
            node.slack,
            "yes" if node.is_critical else "no",
        ])
    ws.append([])
    ws.append(["Total duration", schedule.total_duration])
    ws.append(["Critical path", " -> ".join(schedule.critical_path)])
    ws.append(["Critical path std dev", schedule.critical_path_std_dev])


def _write_evm(wb, data: EVMData) -> None:
    ws = wb.create_sheet("EVM")
    metrics = calculate_evm_metrics(data)
    score = get_health_score(metrics.cpi, metrics.spi)
    rows = [
        ("BAC", data.bac),
        ("PV", data.pv),
        ("EV", data.ev),
        ("AC", data.ac),
        ("CPI", metrics.cpi),
        ("SPI", metrics.spi),
        ("CV", metrics.cv),
        ("SV", metrics.sv),
        ("EAC", metrics.eac),
        ("VAC", metrics.vac),
        ("Percent complete", metrics.percent_complete),
        ("Cost performance", get_performance_status(metrics.cpi)),
        ("Schedule performance", get_performance_status(metrics.spi)),
        ("Health score", score),
        ("Health status", get_health_status(score)),
    ]
    ws.append(["Metric", "Value"])
    for label, value in rows:
        ws.append([label, value])


def export_estimation_workbook(
    path: Path | str,
    *,
    model_results: dict[str, EstimationResult] | None = None,
    recommended_model: ModelName | None = None,
    feature_estimations: Sequence[FeatureEstimationResult] | None = None,
    aggregate: FeatureAggregate | None = None,
    pert_tasks: Sequence[PertTask] = (),
    pert_schedule: PertSchedule | None = None,
    evm_data: EVMData | None = None,
) -> Path:
    """
    Write the supplied results to ``path`` and return it.

    Raises:
        ImportError: If openpyxl is not installed.
        ValueError: If no section has anything to write.
    """
    try:
        import openpyxl
    except ImportError as e:
        raise ImportError("XLSX export requires openpyxl. Install with: pip install openpyxl") from e

    wb = openpyxl.Workbook()
    wb.remove(wb.active)

    if model_results:
        _write_models(wb, model_results, recommended_model)
    if feature_estimations is not None:
        _write_features(wb, feature_estimations, aggregate)
    if pert_schedule is not None:
        _write_schedule(wb, pert_tasks, pert_schedule)
    if evm_data is not None:
        _write_evm(wb, evm_data)

    if not wb.sheetnames:
        raise ValueError("Nothing to export: no results were supplied")

    target = Path(path)
    wb.save(target)
    logger.info("workbook_exported", extra={"path": str(target), "sheets": wb.sheetnames})
    return target
