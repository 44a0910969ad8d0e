"""
Site capacity optimizer for construction schedules.

Levels a WBS schedule against the site's worker capacity, splits large
crews, enforces phase curing/drying gaps and reports equipment conflicts.

Usage:
    from site_capacity import load_schedule, optimize_schedule

    schedule = load_schedule('schedule.json')
    result = optimize_schedule(schedule)
    print(result.get_summary())
"""

from .schedule import (
    ScheduleTask, ProjectSchedule, ProjectResources, Constraints,
    OptimizationResult, build_daily_histogram, compute_task_floats,
    get_task_worker_count, get_default_constraints,
)
from .optimization import optimize_schedule
from .data_loader import load_schedule, load_constraints, schedule_from_dict, constraints_from_dict
from .export import result_frames, export_result

__all__ = [
    'ScheduleTask',
    'ProjectSchedule',
    'ProjectResources',
    'Constraints',
    'OptimizationResult',
    'optimize_schedule',
    'get_default_constraints',
    'build_daily_histogram',
    'compute_task_floats',
    'get_task_worker_count',
    'load_schedule',
    'load_constraints',
    'schedule_from_dict',
    'constraints_from_dict',
    'result_frames',
    'export_result',
]
