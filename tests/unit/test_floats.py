"""Unit tests for total float calculation."""

import pytest

from site_capacity.schedule.floats import compute_task_floats, task_slip_limit
from site_capacity.schedule.network import TaskNetwork

from conftest import make_task


class TestComputeTaskFloats:

    def test_float_to_earliest_fs_successor(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05'),
            make_task(2, '2026-03-09', '2026-03-12', predecessors=[1]),
            make_task(3, '2026-03-11', '2026-03-20', predecessors=[1]),
        ]
        floats = compute_task_floats(tasks, [])
        assert floats[1].total_float_days == 4
        assert not floats[1].is_critical

    def test_no_successor_floats_to_project_finish(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05'),
            make_task(2, '2026-03-01', '2026-03-20'),
        ]
        floats = compute_task_floats(tasks, [])
        assert floats[1].total_float_days == 15
        assert floats[2].total_float_days == 0
        assert floats[2].is_critical

    def test_critical_path_pinned(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05'),
            make_task(2, '2026-03-01', '2026-03-20'),
        ]
        floats = compute_task_floats(tasks, [1])
        assert floats[1].total_float_days == 0
        assert floats[1].is_critical

    def test_negative_gap_clamps_to_zero(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10'),
            make_task(2, '2026-03-05', '2026-03-20', predecessors=[1]),
        ]
        floats = compute_task_floats(tasks, [])
        assert floats[1].total_float_days == 0
        assert floats[1].is_critical

    def test_non_fs_successors_ignored(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05'),
            make_task(2, '2026-03-02', '2026-03-10', predecessors=[(1, 'SS')]),
        ]
        floats = compute_task_floats(tasks, [])
        assert floats[1].total_float_days == 5

    def test_summary_tasks_excluded(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05'),
            make_task(9, '2026-03-01', '2026-04-30', is_summary=True),
            make_task(2, '2026-03-09', '2026-03-12', predecessors=[9]),
        ]
        floats = compute_task_floats(tasks, [])
        assert 9 not in floats
        # Project finish comes from non-summary tasks only
        assert floats[1].total_float_days == 7

    def test_unknown_predecessor_ignored(self):
        tasks = [make_task(1, '2026-03-01', '2026-03-05', predecessors=[42])]
        floats = compute_task_floats(tasks, [])
        assert floats[1].total_float_days == 0

    def test_empty(self):
        assert compute_task_floats([], [1, 2]) == {}


def slip_limit(tasks, uid):
    network = TaskNetwork.from_tasks(tasks)
    return task_slip_limit(network.get_task(uid), network.get_successors(uid), network.project_finish())


class TestTaskSlipLimit:

    @pytest.fixture
    def anchor(self):
        """Long task that keeps the project finish far away."""
        return make_task(99, '2026-03-01', '2026-04-30')

    @pytest.mark.parametrize("relation,expected", [
        ('SS', 3),   # successor start Mar 4 - task start Mar 1
        ('FF', 5),   # successor finish Mar 15 - task finish Mar 10
        ('SF', 14),  # successor finish Mar 15 - task start Mar 1
    ])
    def test_relation_limits(self, anchor, relation, expected):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10'),
            make_task(2, '2026-03-04', '2026-03-15', predecessors=[(1, relation)]),
            anchor,
        ]
        assert slip_limit(tasks, 1) == expected

    def test_tightest_link_wins(self, anchor):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10'),
            make_task(2, '2026-03-06', '2026-03-15', predecessors=[(1, 'SS')]),
            make_task(3, '2026-03-03', '2026-03-15', predecessors=[(1, 'SS')]),
            anchor,
        ]
        assert slip_limit(tasks, 1) == 2

    def test_fs_successor_bounds_by_float(self, anchor):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10'),
            make_task(2, '2026-03-20', '2026-03-25', predecessors=[1]),
            anchor,
        ]
        assert slip_limit(tasks, 1) == 10

    def test_no_successors_floats_to_project_finish(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10'),
            make_task(2, '2026-03-01', '2026-03-25'),
        ]
        assert slip_limit(tasks, 1) == 15

    def test_negative_gap_clamps(self, anchor):
        tasks = [
            make_task(1, '2026-03-05', '2026-03-10'),
            make_task(2, '2026-03-01', '2026-03-15', predecessors=[(1, 'SS')]),
            anchor,
        ]
        assert slip_limit(tasks, 1) == 0

    def test_matches_total_float_without_other_links(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05'),
            make_task(2, '2026-03-09', '2026-03-12', predecessors=[1]),
            make_task(3, '2026-03-11', '2026-03-20', predecessors=[1]),
        ]
        assert slip_limit(tasks, 1) == compute_task_floats(tasks, [])[1].total_float_days == 4
