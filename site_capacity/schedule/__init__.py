"""
Schedule model and workforce accounting for site capacity optimization.

This module provides:
- Schedule task, constraint and report dataclasses
- Calendar-day arithmetic on day ordinals
- Uid-indexed task network with a successor index
- Worker counts, daily demand histogram and overload windows
- Total float per task
- Default Portuguese site constraints
"""

from .models import (
    TaskResource, Predecessor, ScheduleTask, ProjectSchedule, ProjectResources,
    EquipmentConflict, PhaseOverlapRule, Constraints, TaskFloat, DateRange,
    Bottleneck, ScheduleAdjustment, TaskSplit, OptimizationSuggestion,
    EquipmentUsage, CapacityPoint, OptimizationResult,
)
from .network import TaskNetwork
from .workforce import get_task_worker_count, build_daily_histogram, find_overload_windows
from .floats import compute_task_floats, task_slip_limit
from .constraints import get_default_constraints

__all__ = [
    'TaskResource',
    'Predecessor',
    'ScheduleTask',
    'ProjectSchedule',
    'ProjectResources',
    'EquipmentConflict',
    'PhaseOverlapRule',
    'Constraints',
    'TaskFloat',
    'DateRange',
    'Bottleneck',
    'ScheduleAdjustment',
    'TaskSplit',
    'OptimizationSuggestion',
    'EquipmentUsage',
    'CapacityPoint',
    'OptimizationResult',
    'TaskNetwork',
    'get_task_worker_count',
    'build_daily_histogram',
    'find_overload_windows',
    'compute_task_floats',
    'task_slip_limit',
    'get_default_constraints',
]
