"""
Daily capacity timeline (workers allocated vs. site capacity, per phase,
with the shared equipment in use).
"""

from collections import defaultdict
from typing import Iterable

from ..schedule.calendar import from_ordinal
from ..schedule.models import CapacityPoint, EquipmentConflict, EquipmentUsage, ScheduleTask
from ..schedule.workforce import get_task_worker_count, task_ordinal_span


def build_capacity_timeline(
    tasks: Iterable[ScheduleTask],
    capacity: int,
    equipment_conflicts: Iterable[EquipmentConflict] = (),
) -> list[CapacityPoint]:
    """
    One CapacityPoint per day with demand, in date order.

    Sweeps per-phase start/end events so each day's phase breakdown comes
    from running totals instead of re-scanning every task. Equipment is
    swept the same way: a task uses a piece of equipment when its phase is
    listed in that equipment's rule. Only equipment in use that day is
    recorded, in rule order.
    """
    conflicts = list(equipment_conflicts)
    deltas: dict[int, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    equipment_deltas: dict[int, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for task in tasks:
        if task.is_summary:
            continue
        workers = get_task_worker_count(task)
        start, finish = task_ordinal_span(task)
        deltas[start][task.phase] += workers
        deltas[finish + 1][task.phase] -= workers
        for conflict in conflicts:
            if task.phase in conflict.phases:
                equipment_deltas[start][conflict.equipment_name] += 1
                equipment_deltas[finish + 1][conflict.equipment_name] -= 1

    timeline = []
    running: dict[str, int] = defaultdict(int)
    in_use: dict[str, int] = defaultdict(int)
    points = sorted(deltas)
    for current, following in zip(points, points[1:]):
        for phase, delta in deltas[current].items():
            running[phase] += delta
        for name, delta in equipment_deltas.get(current, {}).items():
            in_use[name] += delta

        phases = {phase: workers for phase, workers in sorted(running.items()) if workers > 0}
        total = sum(phases.values())
        if total <= 0:
            continue
        equipment = [
            (c.equipment_name, in_use[c.equipment_name], c.max_concurrent)
            for c in conflicts if in_use[c.equipment_name] > 0
        ]
        for ordinal in range(current, following):
            timeline.append(CapacityPoint(
                day=from_ordinal(ordinal),
                workers_allocated=total,
                workers_capacity=capacity,
                phases=dict(phases),
                equipment=[EquipmentUsage(*usage) for usage in equipment],
            ))
    return timeline


def peak_utilization(timeline: list[CapacityPoint]) -> float:
    """Highest utilization percent in a timeline (0 if empty)."""
    return max((p.utilization_percent for p in timeline), default=0.0)
