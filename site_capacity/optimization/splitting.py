"""
Bottleneck-driven task splitting.

Large crews on overloaded days are split into two sequential halves: Part 1
keeps the uid and start date, Part 2 gets a fresh uid, follows Part 1 (FS)
and inherits every downstream FS link of the original task.
"""

import bisect
import copy
import logging
import math
from datetime import date
from typing import Iterable

from ..schedule.calendar import add_days
from ..schedule.models import Predecessor, ScheduleTask, TaskSplit
from ..schedule.network import TaskNetwork
from ..schedule.workforce import get_task_worker_count, task_ordinal_span

logger = logging.getLogger(__name__)

# Crews at or below this size are never split
SPLIT_WORKER_THRESHOLD = 8

PART_1_SUFFIX = " - Parte 1"
PART_2_SUFFIX = " - Parte 2"


def split_amount(total: float, ratio: float) -> tuple[float, float]:
    """
    Split an amount into (head, tail) with head + tail == total exactly.

    The head is rounded to cents when that keeps the sum exact and leaves
    both parts non-zero. Otherwise the unrounded share is used; with
    ratio >= 0.5 the subtraction total - head is exact in binary floating
    point.
    """
    if not total:
        return total, total
    head = round(total * ratio, 2)
    if head in (0, total) or head + (total - head) != total:
        head = total * ratio
    return head, total - head


def _halve_crew(units: float) -> tuple[float, float]:
    """Part 1 takes the ceiling of half the crew, Part 2 the rest."""
    head = min(units, math.ceil(units / 2))
    return head, units - head


def split_task(task: ScheduleTask, part2_uid: int) -> tuple[ScheduleTask, ScheduleTask]:
    """
    Split one task into two sequential parts.

    Part 1 covers the first ceil(span/2) days, Part 2 the rest. Money and
    hours split by the Part 1 span ratio; labor crews are halved.

    Args:
        task: Task to split (not modified); must span at least 2 days
        part2_uid: Uid for Part 2

    Returns:
        (part1, part2)
    """
    span = task.span_days()
    if span < 2:
        raise ValueError(f"Task {task.uid} spans {span} day and cannot be split")

    part1_span = math.ceil(span / 2)
    ratio = part1_span / span

    part1 = copy.deepcopy(task)
    part2 = copy.deepcopy(task)

    part1.name = f"{task.name}{PART_1_SUFFIX}"
    part1.finish_date = add_days(task.start_date, part1_span - 1)

    part2.uid = part2_uid
    part2.name = f"{task.name}{PART_2_SUFFIX}"
    part2.start_date = add_days(part1.finish_date, 1)
    part2.predecessors = [Predecessor(uid=task.uid, type='FS')]

    # Integer ceiling of duration_days * ratio
    part1.duration_days = -(-task.duration_days * part1_span // span)
    part2.duration_days = task.duration_days - part1.duration_days

    part1.duration_hours, part2.duration_hours = split_amount(task.duration_hours, ratio)
    part1.cost, part2.cost = split_amount(task.cost, ratio)
    part1.material_cost, part2.material_cost = split_amount(task.material_cost, ratio)

    for first, second in zip(part1.resources, part2.resources):
        first.hours, second.hours = split_amount(first.hours, ratio)
        if first.is_labor():
            first.units, second.units = _halve_crew(first.units)
            if first.team_size is not None:
                first.team_size, second.team_size = _halve_crew(first.team_size)
        elif first.type == 'material':
            first.units, second.units = split_amount(first.units, ratio)

    return part1, part2


class TaskSplitter:
    """
    Splits large-crew tasks that contribute to overloaded days.

    Operates in place on a TaskNetwork. The uid counter is passed in and
    returned; it is never kept between calls.
    """

    def __init__(self, network: TaskNetwork, critical_path_uids: Iterable[int] = ()):
        self.network = network
        self.critical = set(critical_path_uids)

    def find_candidates(self, overloaded_days: Iterable[date]) -> list[ScheduleTask]:
        """Tasks eligible for a split, in ascending uid order."""
        days = sorted(day.toordinal() for day in overloaded_days)
        if not days:
            return []

        candidates = []
        for task in self.network.work_tasks():
            if task.uid in self.critical or task.span_days() < 2:
                continue
            if get_task_worker_count(task) <= SPLIT_WORKER_THRESHOLD:
                continue
            start, finish = task_ordinal_span(task)
            i = bisect.bisect_left(days, start)
            if i < len(days) and days[i] <= finish:
                candidates.append(task)
        return sorted(candidates, key=lambda t: t.uid)

    def split(self, overloaded_days: Iterable[date], next_uid: int) -> tuple[int, list[TaskSplit]]:
        """
        Split every candidate once.

        Returns:
            (next free uid, split records)
        """
        splits = []
        for task in self.find_candidates(overloaded_days):
            part2_uid = next_uid
            next_uid += 1
            workers = get_task_worker_count(task)

            part1, part2 = split_task(task, part2_uid)
            self.network.replace_task(part1)
            self.network.add_task(part2, after_uid=task.uid)
            remapped = self.network.remap_predecessors(task.uid, part2_uid, 'FS',
                                                       skip_uids=[part2_uid])

            splits.append(TaskSplit(task.uid, part2_uid, task.name, workers))
            logger.debug(f"Split task {task.uid} ({task.name}, {workers} workers): "
                         f"part 2 uid {part2_uid}, {remapped} successor links remapped")

        return next_uid, splits


def split_overloaded_tasks(
    tasks: list[ScheduleTask],
    overloaded_days: Iterable[date],
    critical_path_uids: Iterable[int],
    next_uid: int,
) -> tuple[list[ScheduleTask], int, list[TaskSplit]]:
    """
    Split large-crew tasks active on overloaded days.

    Args:
        tasks: Schedule tasks (not modified)
        overloaded_days: Days whose demand exceeds site capacity
        critical_path_uids: Uids that must not be split
        next_uid: First uid available for Part 2 tasks

    Returns:
        (new task list, next free uid, split records)
    """
    network = TaskNetwork.from_tasks(tasks)
    next_uid, splits = TaskSplitter(network, critical_path_uids).split(overloaded_days, next_uid)
    return network.to_list(), next_uid, splits
