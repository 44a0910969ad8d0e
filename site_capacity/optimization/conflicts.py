"""
Conflict detection on a leveled schedule.

Three checks, run in order:
1. Phase sequencing: phases that may not overlap must keep their curing or
   drying gap; offending tasks are delayed where the network allows it,
   repeating until no rule moves a task
2. Equipment: shared equipment (crane, concrete pump, scaffolding) used by
   more tasks at once than are available
3. Capacity: overload windows the leveler could not remove
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from ..schedule.calendar import add_days, days_between, format_day, from_ordinal
from ..schedule.floats import task_slip_limit
from ..schedule.models import (
    Bottleneck, Constraints, DateRange, EquipmentConflict, PhaseOverlapRule,
    ScheduleAdjustment, ScheduleTask,
)
from ..schedule.network import TaskNetwork
from ..schedule.workforce import find_overload_windows, task_ordinal_span

logger = logging.getLogger(__name__)


def capacity_severity(overload: int) -> str:
    """Severity of a worker overload: >10 high, >5 medium, else low."""
    if overload > 10:
        return 'high'
    if overload > 5:
        return 'medium'
    return 'low'


def peak_concurrency(tasks: Iterable[ScheduleTask]) -> tuple[int, Optional[tuple[date, date]]]:
    """
    Maximum number of tasks active on the same day.

    Sorted start/end sweep; an end event falls on the day after the finish
    and is applied before starts on the same day.

    Returns:
        (peak, (first_day, last_day) of the first run at the peak), or (0, None)
    """
    events = []
    for task in tasks:
        start, finish = task_ordinal_span(task)
        events.append((start, 1))
        events.append((finish + 1, -1))
    if not events:
        return 0, None
    events.sort()

    peak = 0
    peak_range = None
    running = 0
    i = 0
    while i < len(events):
        ordinal = events[i][0]
        while i < len(events) and events[i][0] == ordinal:
            running += events[i][1]
            i += 1
        if running > peak and i < len(events):
            peak = running
            peak_range = (ordinal, events[i][0] - 1)

    if peak_range is None:
        return 0, None
    return peak, (from_ordinal(peak_range[0]), from_ordinal(peak_range[1]))


def _active_in(tasks: Iterable[ScheduleTask], first: date, last: date) -> list[ScheduleTask]:
    return [t for t in tasks if t.start_date <= last and max(t.start_date, t.finish_date) >= first]


def _phases_of(tasks: Iterable[ScheduleTask]) -> list[str]:
    return sorted({t.phase for t in tasks})


class ConflictDetector:
    """
    Detects (and where possible resolves) site conflicts on a TaskNetwork.

    Phase sequencing shifts tasks in place; the other checks only report.
    """

    def __init__(
        self,
        network: TaskNetwork,
        constraints: Constraints,
        critical_path_uids: Iterable[int] = (),
    ):
        self.network = network
        self.constraints = constraints
        self.critical_path_uids = set(critical_path_uids)

    def _sequencing_limit(self, task: ScheduleTask) -> Optional[int]:
        """
        Days a phase-B task may be delayed; None means unbounded.

        Tasks without successors may push the project finish.
        """
        if task.uid in self.critical_path_uids:
            return 0
        successors = self.network.get_successors(task.uid)
        if not successors:
            return None
        return task_slip_limit(task, successors, self.network.project_finish())

    def rule_offenders(self, rule: PhaseOverlapRule) -> tuple[Optional[date], list[ScheduleTask]]:
        """
        Phase-B tasks starting before a rule allows.

        Returns:
            (required phase-B start or None if the rule does not apply, offenders)
        """
        if rule.allow_overlap:
            return None, []

        tasks = self.network.work_tasks()
        phase_a = [t for t in tasks if t.phase == rule.phase_a]
        phase_b = [t for t in tasks if t.phase == rule.phase_b]
        if not phase_a or not phase_b:
            return None, []

        latest_a = max(max(t.start_date, t.finish_date) for t in phase_a)
        required_start = add_days(latest_a, rule.min_gap_days)
        return required_start, [t for t in phase_b if t.start_date < required_start]

    def _phase_bottleneck(self, rule: PhaseOverlapRule, required_start: date,
                          offenders: list[ScheduleTask]) -> Bottleneck:
        return Bottleneck(
            reason=f"Conflito de fases: {rule.reason}",
            phases=[rule.phase_a, rule.phase_b],
            date_range=DateRange(min(t.start_date for t in offenders), add_days(required_start, -1)),
            kind='phase_sequence',
            severity='medium',
            task_uids=sorted(t.uid for t in offenders),
        )

    def check_phase_rule(self, rule: PhaseOverlapRule) -> tuple[Optional[Bottleneck], list[ScheduleAdjustment]]:
        """
        Enforce one overlap rule.

        Returns:
            (bottleneck or None if the rule holds, adjustments applied)
        """
        required_start, offenders = self.rule_offenders(rule)
        if not offenders:
            return None, []

        bottleneck = self._phase_bottleneck(rule, required_start, offenders)
        adjustments = []
        resolved = True

        # Latest first, so a later offender's move frees float for its predecessors
        for task in sorted(offenders, key=lambda t: (-t.start_date.toordinal(), t.uid)):
            needed = days_between(task.start_date, required_start)
            limit = self._sequencing_limit(task)
            days = needed if limit is None else min(needed, limit)
            if days < needed:
                resolved = False
            if days <= 0:
                logger.debug(f"Phase sequencing: task {task.uid} cannot move "
                             f"({rule.phase_a} -> {rule.phase_b})")
                continue

            original_start, original_finish = task.start_date, task.finish_date
            self.network.shift_task(task.uid, days)
            adjustments.append(ScheduleAdjustment(
                task_uid=task.uid,
                task_name=task.name,
                original_start=original_start,
                new_start=task.start_date,
                original_finish=original_finish,
                new_finish=task.finish_date,
                reason=f"Sequenciamento de fases: {rule.reason}",
            ))
            logger.debug(f"Phase sequencing: task {task.uid} delayed {days} day(s) "
                         f"to {format_day(task.start_date)}")

        bottleneck.resolved = resolved
        return bottleneck, adjustments

    def enforce_phase_rules(self) -> tuple[list[Bottleneck], list[ScheduleAdjustment]]:
        """
        Apply every overlap rule until a full pass moves nothing.

        A shift made for one rule can move a task that is phase A of an
        earlier rule, so passes repeat (at most once per rule, plus one).
        A final check reports any rule still broken as unresolved.

        Returns:
            (one bottleneck per violated rule in rule order, adjustments)
        """
        rules = self.constraints.phase_overlap_rules
        found: dict[int, Bottleneck] = {}
        adjustments = []

        for sweep in range(len(rules) + 1):
            moved = 0
            for index, rule in enumerate(rules):
                bottleneck, applied = self.check_phase_rule(rule)
                if bottleneck is None:
                    continue
                adjustments.extend(applied)
                moved += len(applied)
                previous = found.get(index)
                if previous is None:
                    found[index] = bottleneck
                    continue
                previous.task_uids = sorted(set(previous.task_uids) | set(bottleneck.task_uids))
                previous.date_range = DateRange(
                    min(previous.date_range.start, bottleneck.date_range.start),
                    max(previous.date_range.finish, bottleneck.date_range.finish),
                )
            if not moved:
                break
            logger.debug(f"Phase sequencing pass {sweep + 1}: {moved} shift(s)")

        for index, rule in enumerate(rules):
            required_start, offenders = self.rule_offenders(rule)
            if index in found:
                found[index].resolved = not offenders
            elif offenders:
                found[index] = self._phase_bottleneck(rule, required_start, offenders)
                logger.warning(f"Phase rule {rule.phase_a} -> {rule.phase_b} still broken "
                               f"after sequencing")

        return [found[index] for index in sorted(found)], adjustments

    def check_equipment(self, conflict: EquipmentConflict) -> Optional[Bottleneck]:
        """Report an equipment rule whose peak concurrency exceeds max_concurrent."""
        phases = set(conflict.phases)
        tasks = [t for t in self.network.work_tasks() if t.phase in phases]

        peak, peak_range = peak_concurrency(tasks)
        if peak <= conflict.max_concurrent:
            return None

        first, last = peak_range
        involved = _active_in(tasks, first, last)
        overload = peak - conflict.max_concurrent
        return Bottleneck(
            reason=(f"Conflito de equipamento: {peak} fases a usar "
                    f"{conflict.equipment_name} (máximo: {conflict.max_concurrent})"),
            phases=_phases_of(involved),
            date_range=DateRange(first, last),
            kind='equipment',
            overload=overload,
            severity='high' if overload > 1 else 'medium',
            task_uids=sorted(t.uid for t in involved),
            equipment_name=conflict.equipment_name,
        )

    def check_capacity(self) -> list[Bottleneck]:
        """One bottleneck per remaining overload window."""
        tasks = self.network.work_tasks()
        capacity = self.constraints.max_workers_per_floor

        bottlenecks = []
        for first, last, peak in find_overload_windows(tasks, capacity):
            involved = _active_in(tasks, first, last)
            overload = peak - capacity
            bottlenecks.append(Bottleneck(
                reason=f"Sobrecarga de {overload} trabalhadores ({peak}/{capacity})",
                phases=_phases_of(involved),
                date_range=DateRange(first, last),
                kind='capacity',
                overload=overload,
                severity=capacity_severity(overload),
                task_uids=sorted(t.uid for t in involved),
            ))
        return bottlenecks

    def run(self) -> tuple[list[Bottleneck], list[ScheduleAdjustment]]:
        """
        Run all checks.

        Returns:
            (bottlenecks, sequencing adjustments)
        """
        bottlenecks, adjustments = self.enforce_phase_rules()

        for conflict in self.constraints.equipment_conflicts:
            bottleneck = self.check_equipment(conflict)
            if bottleneck is not None:
                bottlenecks.append(bottleneck)

        bottlenecks.extend(self.check_capacity())

        counts = defaultdict(int)
        for b in bottlenecks:
            counts[b.kind] += 1
        logger.info(f"Conflict detection: {dict(counts) or 'none'}, "
                    f"{len(adjustments)} sequencing shifts")

        return bottlenecks, adjustments


def detect_conflicts(
    tasks: list[ScheduleTask],
    critical_path_uids: Iterable[int],
    constraints: Constraints,
) -> tuple[list[ScheduleTask], list[Bottleneck], list[ScheduleAdjustment]]:
    """
    Detect phase, equipment and capacity conflicts.

    Args:
        tasks: Leveled schedule tasks (not modified)
        critical_path_uids: Uids that must keep their dates
        constraints: Site constraints

    Returns:
        (task list after sequencing shifts, bottlenecks, adjustments)
    """
    network = TaskNetwork.from_tasks(tasks)
    bottlenecks, adjustments = ConflictDetector(network, constraints, critical_path_uids).run()
    return network.to_list(), bottlenecks, adjustments
