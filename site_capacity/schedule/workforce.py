"""
Workforce demand accounting.

Per-task worker counts and the day-indexed demand histogram used to find
site overloads.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from .calendar import format_day, from_ordinal
from .models import ScheduleTask


def get_task_worker_count(task: ScheduleTask) -> int:
    """
    Workers a task puts on site each day.

    Sums labor units (subcontractors count their team size). Tasks without
    labor still occupy one crew slot, so the result is never below 1.
    """
    total = 0.0
    for resource in task.resources:
        if resource.type == 'labor':
            total += resource.units or 0
        elif resource.type == 'subcontractor':
            total += resource.team_size or resource.units or 0
    return max(1, math.ceil(total))


def task_ordinal_span(task: ScheduleTask) -> tuple[int, int]:
    """First and last day ordinals covered by a task (finish never before start)."""
    start = task.start_date.toordinal()
    finish = task.finish_date.toordinal()
    return start, max(start, finish)


def demand_segments(
    tasks: Iterable[ScheduleTask],
    worker_counts: Optional[dict[int, int]] = None,
) -> list[tuple[int, int, int]]:
    """
    Sweep task start/end events into constant-demand segments.

    worker_counts maps uid -> workers for callers that already know them.

    Returns (first_ordinal, last_ordinal, workers) tuples in date order,
    covering only days with demand.
    """
    deltas: dict[int, int] = defaultdict(int)
    for task in tasks:
        if task.is_summary:
            continue
        if worker_counts is None:
            workers = get_task_worker_count(task)
        else:
            workers = worker_counts[task.uid]
        start, finish = task_ordinal_span(task)
        deltas[start] += workers
        deltas[finish + 1] -= workers

    segments = []
    running = 0
    points = sorted(deltas)
    for current, following in zip(points, points[1:]):
        running += deltas[current]
        if running > 0:
            segments.append((current, following - 1, running))
    return segments


def build_daily_histogram(tasks: Iterable[ScheduleTask]) -> dict[str, int]:
    """
    Build the daily worker histogram.

    Returns:
        Dict mapping ISO date -> total workers that day, in date order.
        Summary tasks are skipped.
    """
    histogram = {}
    for first, last, workers in demand_segments(tasks):
        for ordinal in range(first, last + 1):
            histogram[format_day(from_ordinal(ordinal))] = workers
    return histogram


def find_overload_windows(
    tasks: Iterable[ScheduleTask],
    capacity: int,
    worker_counts: Optional[dict[int, int]] = None,
) -> list[tuple[date, date, int]]:
    """
    Find maximal runs of consecutive days whose demand exceeds capacity.

    Returns:
        List of (first_day, last_day, peak_workers) in date order.
    """
    windows: list[list[int]] = []
    for first, last, workers in demand_segments(tasks, worker_counts):
        if workers <= capacity:
            continue
        if windows and windows[-1][1] + 1 == first:
            windows[-1][1] = last
            windows[-1][2] = max(windows[-1][2], workers)
        else:
            windows.append([first, last, workers])
    return [(from_ordinal(a), from_ordinal(b), peak) for a, b, peak in windows]
