"""
Total float calculation.

Float here is the simple successor gap used by the leveling heuristic, not a
full forward/backward CPM pass: the number of days a task can slip before it
collides with its earliest FS successor, or with the project finish when it
has none.
"""

from datetime import date
from typing import Iterable

from .calendar import days_between
from .models import Predecessor, ScheduleTask, TaskFloat


def compute_task_floats(
    tasks: Iterable[ScheduleTask],
    critical_path_uids: Iterable[int],
) -> dict[int, TaskFloat]:
    """
    Compute total float for each non-summary task.

    Float = earliest FS successor start - task finish. Tasks without FS
    successors float up to the latest finish in the schedule. Negative gaps
    clamp to 0, and a task with zero float is flagged critical as well.

    Args:
        tasks: Schedule tasks (summary tasks are skipped)
        critical_path_uids: Uids on the schedule's critical path

    Returns:
        Dict mapping task uid -> TaskFloat
    """
    work = [t for t in tasks if not t.is_summary]
    if not work:
        return {}

    critical = set(critical_path_uids)
    project_finish = max(t.finish_date for t in work)

    earliest_successor_start = {}
    for task in work:
        for pred in task.predecessors:
            if not pred.is_finish_to_start():
                continue
            current = earliest_successor_start.get(pred.uid)
            if current is None or task.start_date < current:
                earliest_successor_start[pred.uid] = task.start_date

    floats = {}
    for task in work:
        if task.uid in critical:
            floats[task.uid] = TaskFloat(task.uid, 0, True)
            continue

        limit = earliest_successor_start.get(task.uid, project_finish)
        total_float = max(0, days_between(task.finish_date, limit))
        floats[task.uid] = TaskFloat(task.uid, total_float, total_float == 0)

    return floats


def task_slip_limit(
    task: ScheduleTask,
    successors: Iterable[tuple[ScheduleTask, Predecessor]],
    project_finish: date,
) -> int:
    """
    Days a task may slip without breaking a successor link.

    FS successors bound it by total float (earliest FS successor start -
    task finish, or project finish - task finish when it has none). Other
    links bound it by their own gap: SS successor start - task start,
    FF successor finish - task finish, SF successor finish - task start.
    Negative gaps clamp to 0.

    Args:
        task: The task to move
        successors: (successor, link) pairs, e.g. from TaskNetwork.get_successors
        project_finish: Latest finish among non-summary tasks
    """
    fs_starts = []
    gaps = []
    for succ, pred in successors:
        if pred.is_finish_to_start():
            fs_starts.append(succ.start_date)
        elif pred.type == 'SS':
            gaps.append(days_between(task.start_date, succ.start_date))
        elif pred.type == 'FF':
            gaps.append(days_between(task.finish_date, succ.finish_date))
        else:
            gaps.append(days_between(task.start_date, succ.finish_date))
    gaps.append(days_between(task.finish_date, min(fs_starts) if fs_starts else project_finish))
    return max(0, min(gaps))
