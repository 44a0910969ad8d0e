"""
Greedy resource leveling.

Flattens the daily worker histogram by delaying non-critical tasks inside
their float. The heuristic is greedy and not optimal:

1. Find overload windows (consecutive days above capacity), in date order
2. In the first window that has a movable task, pick the task with the
   largest shift limit (ties: lowest uid)
3. Delay it until it starts after the window, or as far as its limit allows
4. Repeat until no overload remains, nothing can move, or the iteration
   cap is reached

Worker counts and the successor index do not change while leveling, so
they are built once; shift limits are computed only for tasks active in
the window being leveled.

Overloads that survive are reported as capacity bottlenecks downstream.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from ..config.settings import settings
from ..schedule.calendar import days_between, format_day
from ..schedule.floats import task_slip_limit
from ..schedule.models import Constraints, ScheduleAdjustment, ScheduleTask
from ..schedule.network import TaskNetwork
from ..schedule.workforce import find_overload_windows, get_task_worker_count

logger = logging.getLogger(__name__)


class ResourceLeveler:
    """
    Resource leveling over a TaskNetwork.

    Usage:
        leveler = ResourceLeveler(network, constraints, critical_path_uids)
        adjustments = leveler.run()
    """

    def __init__(
        self,
        network: TaskNetwork,
        constraints: Constraints,
        critical_path_uids: Iterable[int] = (),
        max_iterations: Optional[int] = None,
    ):
        self.network = network
        self.constraints = constraints
        self.critical_path_uids = set(critical_path_uids)
        self.max_iterations = (settings.MAX_LEVELING_ITERATIONS
                               if max_iterations is None else max_iterations)
        self.iterations = 0
        self._worker_counts: Optional[dict[int, int]] = None

    def shift_limit(self, task: ScheduleTask, project_finish: Optional[date] = None) -> int:
        """Days a task may be delayed: 0 on the critical path, else its slip limit."""
        if task.uid in self.critical_path_uids:
            return 0
        if project_finish is None:
            project_finish = self.network.project_finish()
        return task_slip_limit(task, self.network.get_successors(task.uid), project_finish)

    def _pick_shift(self) -> Optional[tuple[ScheduleTask, int, date]]:
        """Choose the next (task, shift_days, window_start), or None if stuck."""
        tasks = self.network.work_tasks()
        if self._worker_counts is None:
            self._worker_counts = {t.uid: get_task_worker_count(t) for t in tasks}
        windows = find_overload_windows(tasks, self.constraints.max_workers_per_floor,
                                        self._worker_counts)
        if not windows:
            return None

        project_finish = max(t.finish_date for t in tasks)

        for window_start, window_end, _peak in windows:
            candidates = []
            for task in tasks:
                if task.uid in self.critical_path_uids:
                    continue
                if task.start_date > window_end or max(task.start_date, task.finish_date) < window_start:
                    continue
                limit = self.shift_limit(task, project_finish)
                if limit > 0:
                    candidates.append((task, limit))

            if not candidates:
                continue

            candidates.sort(key=lambda c: (-c[1], c[0].uid))
            task, limit = candidates[0]
            needed = days_between(task.start_date, window_end) + 1
            return task, min(needed, limit), window_start

        return None

    def run(self) -> list[ScheduleAdjustment]:
        """
        Level the network in place.

        Returns:
            One ScheduleAdjustment per shift applied
        """
        adjustments = []

        while self.iterations < self.max_iterations:
            choice = self._pick_shift()
            if choice is None:
                break
            self.iterations += 1

            task, days, window_start = choice
            original_start, original_finish = task.start_date, task.finish_date
            self.network.shift_task(task.uid, days)

            adjustments.append(ScheduleAdjustment(
                task_uid=task.uid,
                task_name=task.name,
                original_start=original_start,
                new_start=task.start_date,
                original_finish=original_finish,
                new_finish=task.finish_date,
                reason=(f"Nivelamento de recursos: adiar {days} dia(s) "
                        f"para reduzir pico em {format_day(window_start)}"),
            ))
            logger.debug(f"Leveling: task {task.uid} delayed {days} day(s) "
                         f"({format_day(original_start)} -> {format_day(task.start_date)})")
        else:
            logger.warning(f"Leveling stopped at iteration cap ({self.max_iterations})")

        return adjustments


def level_resources(
    tasks: list[ScheduleTask],
    critical_path_uids: Iterable[int],
    constraints: Constraints,
    max_iterations: Optional[int] = None,
) -> tuple[list[ScheduleTask], list[ScheduleAdjustment]]:
    """
    Level a task list against site capacity.

    Args:
        tasks: Schedule tasks (not modified)
        critical_path_uids: Uids that must keep their dates
        constraints: Site constraints (max_workers_per_floor is used)
        max_iterations: Shift cap (default: settings.MAX_LEVELING_ITERATIONS)

    Returns:
        (leveled task list, adjustments)
    """
    network = TaskNetwork.from_tasks(tasks)
    adjustments = ResourceLeveler(network, constraints, critical_path_uids, max_iterations).run()
    return network.to_list(), adjustments
