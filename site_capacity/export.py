"""
Export optimization results as schema-validated CSV files plus JSON.

Output files:
    optimized_tasks.csv       - Leveled task list
    schedule_adjustments.csv  - Date shifts applied
    schedule_bottlenecks.csv  - Conflicts found
    capacity_timeline.csv     - Daily workers vs. capacity
    optimization_result.json  - Full result (camelCase, as consumed by the dashboard)
"""

import json
import logging
from pathlib import Path

import pandas as pd

from schemas import validated_df_to_csv

from .schedule.calendar import format_day
from .schedule.models import OptimizationResult
from .schedule.workforce import get_task_worker_count

logger = logging.getLogger(__name__)

TASK_COLUMNS = [
    'uid', 'wbs', 'name', 'phase', 'start_date', 'finish_date', 'duration_days',
    'duration_hours', 'workers', 'cost', 'material_cost', 'is_summary',
    'is_milestone', 'predecessors', 'split_from_uid',
]
ADJUSTMENT_COLUMNS = [
    'task_uid', 'task_name', 'original_start', 'new_start', 'original_finish',
    'new_finish', 'shift_days', 'reason',
]
BOTTLENECK_COLUMNS = [
    'kind', 'reason', 'phases', 'start_date', 'finish_date', 'overload',
    'severity', 'task_uids', 'equipment_name', 'resolved',
]
TIMELINE_COLUMNS = [
    'date', 'workers_allocated', 'workers_capacity', 'utilization_percent',
    'is_bottleneck', 'phases', 'equipment',
]

OUTPUT_FILES = {
    'optimized_tasks': 'optimized_tasks.csv',
    'adjustments': 'schedule_adjustments.csv',
    'bottlenecks': 'schedule_bottlenecks.csv',
    'capacity_timeline': 'capacity_timeline.csv',
}
RESULT_JSON = 'optimization_result.json'


def result_frames(result: OptimizationResult) -> dict[str, pd.DataFrame]:
    """
    Tabular views of an optimization result.

    Returns:
        Dict with 'optimized_tasks', 'adjustments', 'bottlenecks' and
        'capacity_timeline' DataFrames (columns fixed even when empty)
    """
    part2_of = {s.part2_uid: s.original_uid for s in result.splits}

    tasks = [{
        'uid': t.uid,
        'wbs': t.wbs,
        'name': t.name,
        'phase': t.phase,
        'start_date': format_day(t.start_date),
        'finish_date': format_day(t.finish_date),
        'duration_days': t.duration_days,
        'duration_hours': t.duration_hours,
        'workers': get_task_worker_count(t),
        'cost': t.cost,
        'material_cost': t.material_cost,
        'is_summary': t.is_summary,
        'is_milestone': t.is_milestone,
        'predecessors': ';'.join(f"{p.uid}{p.type}" for p in t.predecessors),
        'split_from_uid': part2_of.get(t.uid),
    } for t in result.optimized_tasks]

    adjustments = [{
        'task_uid': a.task_uid,
        'task_name': a.task_name,
        'original_start': format_day(a.original_start),
        'new_start': format_day(a.new_start),
        'original_finish': format_day(a.original_finish),
        'new_finish': format_day(a.new_finish),
        'shift_days': a.shift_days(),
        'reason': a.reason,
    } for a in result.adjustments]

    bottlenecks = [{
        'kind': b.kind,
        'reason': b.reason,
        'phases': ';'.join(b.phases),
        'start_date': format_day(b.date_range.start),
        'finish_date': format_day(b.date_range.finish),
        'overload': b.overload,
        'severity': b.severity,
        'task_uids': ';'.join(str(uid) for uid in b.task_uids),
        'equipment_name': b.equipment_name,
        'resolved': b.resolved,
    } for b in result.bottlenecks]

    timeline = [{
        'date': format_day(p.day),
        'workers_allocated': p.workers_allocated,
        'workers_capacity': p.workers_capacity,
        'utilization_percent': round(p.utilization_percent, 2),
        'is_bottleneck': p.is_bottleneck,
        'phases': ';'.join(f"{phase}:{workers}" for phase, workers in p.phases.items()),
        'equipment': ';'.join(f"{e.name}:{e.count}/{e.max_concurrent}" for e in p.equipment),
    } for p in result.capacity_timeline]

    return {
        'optimized_tasks': pd.DataFrame(tasks, columns=TASK_COLUMNS),
        'adjustments': pd.DataFrame(adjustments, columns=ADJUSTMENT_COLUMNS),
        'bottlenecks': pd.DataFrame(bottlenecks, columns=BOTTLENECK_COLUMNS),
        'capacity_timeline': pd.DataFrame(timeline, columns=TIMELINE_COLUMNS),
    }


def export_result(result: OptimizationResult, output_dir: Path) -> dict[str, Path]:
    """
    Write the result's CSV files and JSON to output_dir.

    Raises:
        SchemaValidationError: If a frame drifts from its registered schema

    Returns:
        Dict mapping output name -> written path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    for key, df in result_frames(result).items():
        path = output_dir / OUTPUT_FILES[key]
        validated_df_to_csv(df, path, index=False)
        written[key] = path
        logger.info(f"Wrote {len(df)} rows to {path}")

    json_path = output_dir / RESULT_JSON
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
    written['result'] = json_path
    logger.info(f"Wrote {json_path}")

    return written
