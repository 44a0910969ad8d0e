"""
Data Loader for schedule JSON.

Reads the schedule and constraint files produced by the WBS schedule
generator (camelCase JSON) into the dataclasses used by the optimizer, and
renders tasks back to the same format.
"""

import json
from pathlib import Path
from typing import Any, Optional, Union

from .schedule.calendar import format_day
from .schedule.constraints import get_default_constraints
from .schedule.models import (
    RELATION_TYPES, RESOURCE_TYPES, Constraints, EquipmentConflict,
    PhaseOverlapRule, Predecessor, ProjectSchedule, ScheduleTask, TaskResource,
)


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with open(path, encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON in {path}: {e}") from e


def _optional_date(value: Optional[str]):
    return value or None


def resource_from_dict(data: dict) -> TaskResource:
    res_type = data.get('type', 'labor')
    if res_type not in RESOURCE_TYPES:
        raise ValueError(f"Unknown resource type '{res_type}' for resource '{data.get('name')}'")
    team_size = data.get('teamSize')
    return TaskResource(
        name=data.get('name', ''),
        type=res_type,
        units=float(data.get('units') or 0),
        rate=float(data.get('rate') or 0),
        hours=float(data.get('hours') or 0),
        team_size=int(team_size) if team_size is not None else None,
    )


def predecessor_from_dict(data: dict) -> Predecessor:
    rel_type = data.get('type', 'FS')
    if rel_type not in RELATION_TYPES:
        raise ValueError(f"Unknown relation type '{rel_type}' for predecessor {data.get('uid')}")
    return Predecessor(uid=int(data['uid']), type=rel_type, lag=float(data.get('lag') or 0))


def task_from_dict(data: dict) -> ScheduleTask:
    """Build a ScheduleTask from its camelCase JSON form."""
    try:
        uid = int(data['uid'])
        start = data['startDate']
        finish = data['finishDate']
    except KeyError as e:
        raise ValueError(f"Task is missing required field {e}") from e

    return ScheduleTask(
        uid=uid,
        wbs=str(data.get('wbs', '')),
        name=data.get('name', ''),
        duration_days=int(data.get('durationDays') or 0),
        duration_hours=float(data.get('durationHours') or 0),
        start_date=start,
        finish_date=finish,
        predecessors=[predecessor_from_dict(p) for p in data.get('predecessors', [])],
        phase=data.get('phase', 'cleanup'),
        resources=[resource_from_dict(r) for r in data.get('resources', [])],
        cost=float(data.get('cost') or 0),
        material_cost=float(data.get('materialCost') or 0),
        outline_level=int(data.get('outlineLevel') or 1),
        percent_complete=float(data.get('percentComplete') or 0),
        is_summary=bool(data.get('isSummary', False)),
        is_milestone=bool(data.get('isMilestone', False)),
        notes=data.get('notes'),
    )


def task_to_dict(task: ScheduleTask) -> dict:
    """Render a ScheduleTask in the camelCase JSON form."""
    resources = []
    for r in task.resources:
        resource = {'name': r.name, 'type': r.type, 'units': r.units, 'rate': r.rate, 'hours': r.hours}
        if r.team_size is not None:
            resource['teamSize'] = r.team_size
        resources.append(resource)

    data = {
        'uid': task.uid,
        'wbs': task.wbs,
        'name': task.name,
        'durationDays': task.duration_days,
        'durationHours': task.duration_hours,
        'startDate': format_day(task.start_date),
        'finishDate': format_day(task.finish_date),
        'predecessors': [{'uid': p.uid, 'type': p.type, 'lag': p.lag} for p in task.predecessors],
        'phase': task.phase,
        'resources': resources,
        'cost': task.cost,
        'materialCost': task.material_cost,
        'outlineLevel': task.outline_level,
        'percentComplete': task.percent_complete,
        'isSummary': task.is_summary,
        'isMilestone': task.is_milestone,
    }
    if task.notes is not None:
        data['notes'] = task.notes
    return data


def schedule_from_dict(data: dict) -> ProjectSchedule:
    """
    Build a ProjectSchedule from the generator's JSON.

    Raises:
        ValueError: On missing task fields or unknown relation/resource types
    """
    return ProjectSchedule(
        project_name=data.get('projectName', ''),
        start_date=_optional_date(data.get('startDate')),
        finish_date=_optional_date(data.get('finishDate')),
        total_duration_days=int(data.get('totalDurationDays') or 0),
        total_cost=float(data.get('totalCost') or 0),
        tasks=[task_from_dict(t) for t in data.get('tasks', [])],
        resources=list(data.get('resources', [])),
        critical_path=[int(uid) for uid in data.get('criticalPath', [])],
        team_summary=dict(data.get('teamSummary') or {}),
    )


def constraints_from_dict(data: dict) -> Constraints:
    """
    Build Constraints from JSON; omitted sections keep their defaults.

    Keys: maxWorkersPerFloor, equipmentConflicts [{equipmentName,
    maxConcurrent, phases}], phaseOverlapRules [{phaseA, phaseB,
    allowOverlap, minGapDays, reason}].
    """
    constraints = get_default_constraints()

    try:
        if 'maxWorkersPerFloor' in data:
            constraints.max_workers_per_floor = int(data['maxWorkersPerFloor'])

        if 'equipmentConflicts' in data:
            constraints.equipment_conflicts = [
                EquipmentConflict(
                    equipment_name=e['equipmentName'],
                    max_concurrent=int(e['maxConcurrent']),
                    phases=list(e.get('phases', [])),
                )
                for e in data['equipmentConflicts']
            ]

        if 'phaseOverlapRules' in data:
            constraints.phase_overlap_rules = [
                PhaseOverlapRule(
                    phase_a=r['phaseA'],
                    phase_b=r['phaseB'],
                    allow_overlap=bool(r.get('allowOverlap', False)),
                    min_gap_days=int(r.get('minGapDays') or 0),
                    reason=r.get('reason', ''),
                )
                for r in data['phaseOverlapRules']
            ]
    except KeyError as e:
        raise ValueError(f"Constraint entry is missing required field {e}") from e

    return constraints


def load_schedule(path: Union[str, Path]) -> ProjectSchedule:
    """
    Load a schedule JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is malformed or has invalid fields
    """
    return schedule_from_dict(_read_json(path))


def load_constraints(path: Union[str, Path]) -> Constraints:
    """Load a constraints JSON file (see constraints_from_dict)."""
    return constraints_from_dict(_read_json(path))
