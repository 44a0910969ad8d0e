"""
Task network for schedule optimization.

Holds the working copy of the schedule as a uid-indexed arena. Predecessor
entries are logical uids; structural edits (splits, remaps) rewrite them
explicitly so dangling references can be checked mechanically.
"""

import copy
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from .calendar import add_days
from .models import Predecessor, ScheduleTask


class TaskNetwork:
    """
    Uid-indexed task arena with a successor index.

    Task order follows the input order; tasks inserted by splits are placed
    right after the task they were split from.
    """

    def __init__(self):
        self.tasks: dict[int, ScheduleTask] = {}
        self._order: list[int] = []
        self._successors: Optional[dict[int, list[tuple[int, Predecessor]]]] = None

    @classmethod
    def from_tasks(cls, tasks: Iterable[ScheduleTask], clone: bool = True) -> 'TaskNetwork':
        """
        Build a network from a task list.

        Args:
            tasks: Schedule tasks
            clone: Deep-copy each task so the caller's objects are never modified

        Raises:
            ValueError: If two tasks share a uid
        """
        network = cls()
        for task in tasks:
            network.add_task(copy.deepcopy(task) if clone else task)
        return network

    def add_task(self, task: ScheduleTask, after_uid: Optional[int] = None) -> None:
        """Add a task, optionally placing it right after another task."""
        if task.uid in self.tasks:
            raise ValueError(f"Duplicate task uid {task.uid}")
        self.tasks[task.uid] = task
        if after_uid is None or after_uid not in self.tasks:
            self._order.append(task.uid)
        else:
            self._order.insert(self._order.index(after_uid) + 1, task.uid)
        self._successors = None

    def replace_task(self, task: ScheduleTask) -> None:
        """Swap in a new version of an existing task, keeping its position."""
        if task.uid not in self.tasks:
            raise KeyError(f"Task {task.uid} not in network")
        self.tasks[task.uid] = task
        self._successors = None

    def get_task(self, uid: int) -> Optional[ScheduleTask]:
        return self.tasks.get(uid)

    def to_list(self) -> list[ScheduleTask]:
        """Tasks in schedule order."""
        return [self.tasks[uid] for uid in self._order]

    def work_tasks(self) -> list[ScheduleTask]:
        """Non-summary tasks in schedule order."""
        return [t for t in self.to_list() if not t.is_summary]

    def max_uid(self) -> int:
        """Highest uid used by any task or predecessor reference (0 if empty)."""
        highest = 0
        for task in self.tasks.values():
            highest = max(highest, task.uid)
            for pred in task.predecessors:
                highest = max(highest, pred.uid)
        return highest

    def project_finish(self) -> Optional[date]:
        """Latest finish among non-summary tasks."""
        finishes = [t.finish_date for t in self.tasks.values() if not t.is_summary]
        return max(finishes) if finishes else None

    def _build_successor_index(self) -> dict[int, list[tuple[int, Predecessor]]]:
        index = defaultdict(list)
        for uid in self._order:
            task = self.tasks[uid]
            if task.is_summary:
                continue
            for pred in task.predecessors:
                index[pred.uid].append((uid, pred))
        return index

    def get_successors(self, uid: int) -> list[tuple[ScheduleTask, Predecessor]]:
        """Non-summary tasks that reference uid as a predecessor, with the link."""
        if self._successors is None:
            self._successors = self._build_successor_index()
        return [(self.tasks[s], pred) for s, pred in self._successors.get(uid, [])]

    def remap_predecessors(self, old_uid: int, new_uid: int, relation: str = 'FS',
                           skip_uids: Iterable[int] = ()) -> int:
        """
        Point every `relation` reference to old_uid at new_uid instead.

        Returns the number of references rewritten.
        """
        skip = set(skip_uids)
        rewritten = 0
        for uid in self._order:
            if uid in skip:
                continue
            for pred in self.tasks[uid].predecessors:
                if pred.uid == old_uid and pred.type == relation:
                    pred.uid = new_uid
                    rewritten += 1
        if rewritten:
            self._successors = None
        return rewritten

    def shift_task(self, uid: int, days: int) -> ScheduleTask:
        """Move a task later by `days`, keeping its duration."""
        task = self.tasks[uid]
        task.start_date = add_days(task.start_date, days)
        task.finish_date = add_days(task.finish_date, days)
        return task

    def topological_sort(self) -> list[int]:
        """
        Return uids in dependency order (Kahn's algorithm).

        References to unknown uids are ignored. Raises ValueError if a
        circular dependency is detected.
        """
        in_degree = {uid: 0 for uid in self._order}
        successors = defaultdict(list)
        for uid in self._order:
            for pred in self.tasks[uid].predecessors:
                if pred.uid in self.tasks:
                    in_degree[uid] += 1
                    successors[pred.uid].append(uid)

        queue = [uid for uid in self._order if in_degree[uid] == 0]
        result = []
        while queue:
            uid = queue.pop(0)
            result.append(uid)
            for succ in successors[uid]:
                in_degree[succ] -= 1
                if in_degree[succ] == 0:
                    queue.append(succ)

        if len(result) != len(self.tasks):
            remaining = sorted(set(self.tasks) - set(result))
            raise ValueError(f"Circular dependency detected involving {len(remaining)} tasks: "
                             f"{remaining[:5]}...")
        return result

    def validate(self) -> list[str]:
        """
        Validate network integrity.

        Returns list of issues found (empty if valid).
        """
        issues = []

        for uid in self._order:
            for pred in self.tasks[uid].predecessors:
                if pred.uid not in self.tasks:
                    issues.append(f"Task {uid} references missing predecessor {pred.uid}")
                elif pred.uid == uid:
                    issues.append(f"Task {uid} references itself")

        try:
            self.topological_sort()
        except ValueError as e:
            issues.append(str(e))

        return issues

    def get_statistics(self) -> dict:
        """Get network statistics."""
        phases = defaultdict(int)
        links = 0
        for task in self.tasks.values():
            links += len(task.predecessors)
            if not task.is_summary:
                phases[task.phase] += 1

        return {
            'total_tasks': len(self.tasks),
            'summary_tasks': sum(1 for t in self.tasks.values() if t.is_summary),
            'total_dependencies': links,
            'phases': dict(phases),
        }

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, uid: int) -> bool:
        return uid in self.tasks

    def __repr__(self) -> str:
        return f"TaskNetwork({len(self.tasks)} tasks)"
