"""
Unit tests for worker accounting, the daily histogram and overload windows.
"""

from datetime import date

import pytest

from site_capacity.schedule.workforce import (
    build_daily_histogram, demand_segments, find_overload_windows, get_task_worker_count,
)

from conftest import make_resource, make_task


class TestWorkerCount:
    """Test get_task_worker_count."""

    def test_sums_labor_units(self):
        task = make_task(1, '2026-03-01', '2026-03-02', resources=[
            make_resource(3), make_resource(2, name='Servente'),
        ])
        assert get_task_worker_count(task) == 5

    def test_fractional_units_round_up(self):
        task = make_task(1, '2026-03-01', '2026-03-02', resources=[make_resource(2.5)])
        assert get_task_worker_count(task) == 3

    def test_ignores_material_and_machinery(self):
        task = make_task(1, '2026-03-01', '2026-03-02', resources=[
            make_resource(4),
            make_resource(100, type='material', name='Tijolo'),
            make_resource(2, type='machinery', name='Retroescavadora'),
        ])
        assert get_task_worker_count(task) == 4

    def test_subcontractor_team_size(self):
        task = make_task(1, '2026-03-01', '2026-03-02', resources=[
            make_resource(1, type='subcontractor', team_size=7),
        ])
        assert get_task_worker_count(task) == 7

    def test_subcontractor_without_team_size_uses_units(self):
        task = make_task(1, '2026-03-01', '2026-03-02', resources=[
            make_resource(3, type='subcontractor'),
        ])
        assert get_task_worker_count(task) == 3

    @pytest.mark.parametrize("resources", [
        [],
        [make_resource(0)],
        [make_resource(50, type='material', name='Areia')],
    ])
    def test_never_below_one(self, resources):
        task = make_task(1, '2026-03-01', '2026-03-01', resources=resources)
        assert get_task_worker_count(task) == 1


class TestDailyHistogram:
    """Test build_daily_histogram."""

    def test_overlapping_tasks_add_up(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-03', workers=4),
            make_task(2, '2026-03-03', '2026-03-04', workers=6),
        ]
        assert build_daily_histogram(tasks) == {
            '2026-03-01': 4,
            '2026-03-02': 4,
            '2026-03-03': 10,
            '2026-03-04': 6,
        }

    def test_keys_in_date_order(self):
        tasks = [
            make_task(1, '2026-04-10', '2026-04-11', workers=2),
            make_task(2, '2026-03-30', '2026-04-01', workers=3),
        ]
        keys = list(build_daily_histogram(tasks))
        assert keys == sorted(keys)

    def test_gap_days_are_absent(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-01', workers=2),
            make_task(2, '2026-03-04', '2026-03-04', workers=2),
        ]
        assert list(build_daily_histogram(tasks)) == ['2026-03-01', '2026-03-04']

    def test_summary_tasks_skipped(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-02', workers=30, is_summary=True),
            make_task(2, '2026-03-01', '2026-03-01', workers=2),
        ]
        assert build_daily_histogram(tasks) == {'2026-03-01': 2}

    def test_only_summary_tasks(self):
        tasks = [make_task(1, '2026-03-01', '2026-03-05', workers=10, is_summary=True)]
        assert build_daily_histogram(tasks) == {}

    def test_empty(self):
        assert build_daily_histogram([]) == {}

    def test_finish_before_start_counts_one_day(self):
        task = make_task(1, '2026-03-05', '2026-03-02', workers=3)
        assert build_daily_histogram([task]) == {'2026-03-05': 3}

    def test_segments_match_histogram(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10', workers=5),
            make_task(2, '2026-03-04', '2026-03-06', workers=5),
        ]
        first = date(2026, 3, 1).toordinal()
        assert demand_segments(tasks) == [
            (first, first + 2, 5),
            (first + 3, first + 5, 10),
            (first + 6, first + 9, 5),
        ]


class TestOverloadWindows:
    """Test find_overload_windows."""

    def test_adjacent_overloaded_segments_merge(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-06', workers=15),
            make_task(2, '2026-03-03', '2026-03-04', workers=10),
            make_task(3, '2026-03-05', '2026-03-08', workers=8),
        ]
        # 15, 15, 25, 25, 23, 23, 8, 8
        assert find_overload_windows(tasks, 20) == [
            (date(2026, 3, 3), date(2026, 3, 6), 25),
        ]

    def test_separate_windows(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-10', workers=10),
            make_task(2, '2026-03-02', '2026-03-02', workers=12),
            make_task(3, '2026-03-08', '2026-03-09', workers=11),
        ]
        assert find_overload_windows(tasks, 20) == [
            (date(2026, 3, 2), date(2026, 3, 2), 22),
            (date(2026, 3, 8), date(2026, 3, 9), 21),
        ]

    def test_exactly_at_capacity_is_not_overload(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05', workers=10),
            make_task(2, '2026-03-01', '2026-03-05', workers=10),
        ]
        assert find_overload_windows(tasks, 20) == []

    def test_known_worker_counts_used(self):
        tasks = [
            make_task(1, '2026-03-01', '2026-03-05', workers=10),
            make_task(2, '2026-03-01', '2026-03-05', workers=10),
        ]
        assert find_overload_windows(tasks, 20, {1: 10, 2: 11}) == [
            (date(2026, 3, 1), date(2026, 3, 5), 21),
        ]
