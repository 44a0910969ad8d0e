"""
Site capacity optimizer.

Runs the optimization pipeline once, stage by stage:

    Split -> Float -> Level -> DetectConflicts -> Suggest -> Assemble

The Float stage is diagnostic: it logs how many tasks start without float.
Leveling and phase sequencing compute slip limits from the current dates
of the tasks they move.

Usage:
    from site_capacity.optimization import optimize_schedule

    result = optimize_schedule(schedule)
    print(result.get_summary())
"""

import logging
from datetime import date
from typing import Optional

from ..schedule.calendar import days_between, iter_days
from ..schedule.constraints import get_default_constraints
from ..schedule.floats import compute_task_floats
from ..schedule.models import Constraints, OptimizationResult, ProjectResources, ProjectSchedule
from ..schedule.network import TaskNetwork
from ..schedule.workforce import find_overload_windows
from .conflicts import ConflictDetector
from .leveling import ResourceLeveler
from .splitting import TaskSplitter
from .suggestions import generate_suggestions
from .timeline import build_capacity_timeline

logger = logging.getLogger(__name__)


def _schedule_bounds(schedule: ProjectSchedule) -> tuple[Optional[date], Optional[date]]:
    """Schedule start/finish, falling back to the task dates."""
    start, finish = schedule.start_date, schedule.finish_date
    work = [t for t in schedule.tasks if not t.is_summary] or schedule.tasks
    if start is None and work:
        start = min(t.start_date for t in work)
    if finish is None and work:
        finish = max(max(t.start_date, t.finish_date) for t in work)
    return start, finish


def _overloaded_days(network: TaskNetwork, capacity: int) -> list[date]:
    days = []
    for first, last, _peak in find_overload_windows(network.work_tasks(), capacity):
        days.extend(iter_days(first, last))
    return days


def optimize_schedule(
    schedule: ProjectSchedule,
    resources: Optional[ProjectResources] = None,
    constraints: Optional[Constraints] = None,
) -> OptimizationResult:
    """
    Level a schedule against site capacity and report what remains.

    Args:
        schedule: Project schedule (never modified)
        resources: Aggregated project resources (accepted, not used)
        constraints: Site constraints (default: get_default_constraints())

    Returns:
        OptimizationResult with the optimized task list, bottlenecks,
        adjustments, suggestions and duration metrics
    """
    if constraints is None:
        constraints = get_default_constraints()

    if not schedule.tasks:
        logger.info(f"Schedule '{schedule.project_name}' has no tasks, nothing to optimize")
        return OptimizationResult(
            original_schedule=schedule,
            optimized_tasks=[],
            bottlenecks=[],
            adjustments=[],
            suggestions=[],
            efficiency_gain=0.0,
            original_duration=0,
        )

    network = TaskNetwork.from_tasks(schedule.tasks)
    for issue in network.validate():
        logger.warning(f"Schedule network: {issue}")

    critical_path = list(schedule.critical_path)
    capacity = constraints.max_workers_per_floor
    stats = network.get_statistics()
    logger.info(f"Optimizing '{schedule.project_name}': {stats['total_tasks']} tasks "
                f"({stats['summary_tasks']} summary, {stats['total_dependencies']} links), "
                f"capacity {capacity} workers/floor")
    logger.debug(f"Tasks per phase: {stats['phases']}")

    # Split
    overloaded = _overloaded_days(network, capacity)
    next_uid, splits = TaskSplitter(network, critical_path).split(overloaded, network.max_uid() + 1)
    logger.info(f"Split stage: {len(overloaded)} overloaded days, {len(splits)} tasks split")
    logger.debug(f"Next free uid after splitting: {next_uid}")

    # Float
    floats = compute_task_floats(network.work_tasks(), critical_path)
    logger.info(f"Float stage: {sum(1 for f in floats.values() if f.is_critical)} of "
                f"{len(floats)} tasks have no float")

    # Level
    leveler = ResourceLeveler(network, constraints, critical_path)
    adjustments = leveler.run()
    logger.info(f"Leveling stage: {len(adjustments)} shifts in {leveler.iterations} iterations")

    # Detect conflicts
    bottlenecks, sequencing = ConflictDetector(network, constraints, critical_path).run()
    adjustments.extend(sequencing)

    # Suggest
    suggestions = generate_suggestions(bottlenecks, adjustments, splits)

    # Assemble
    optimized_tasks = network.to_list()
    start, finish = _schedule_bounds(schedule)
    original_duration = days_between(start, finish) if start and finish else 0

    optimized_finish = network.project_finish()
    if start and optimized_finish:
        optimized_duration = days_between(start, optimized_finish)
    else:
        optimized_duration = original_duration

    if original_duration:
        efficiency_gain = (original_duration - optimized_duration) / original_duration * 100
    else:
        efficiency_gain = 0.0

    result = OptimizationResult(
        original_schedule=schedule,
        optimized_tasks=optimized_tasks,
        bottlenecks=bottlenecks,
        adjustments=adjustments,
        suggestions=suggestions,
        efficiency_gain=efficiency_gain,
        original_duration=original_duration,
        optimized_duration=optimized_duration,
        splits=splits,
        capacity_timeline=build_capacity_timeline(optimized_tasks, capacity,
                                                  constraints.equipment_conflicts),
    )
    logger.info(f"Optimization complete: {result.get_summary()}")
    return result
