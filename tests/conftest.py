"""Pytest configuration and fixtures."""
import json
from datetime import date

import pytest

from site_capacity.schedule.models import (
    Constraints, EquipmentConflict, PhaseOverlapRule, Predecessor,
    ProjectSchedule, ScheduleTask, TaskResource,
)


def make_resource(units=1, type='labor', name='Pedreiro', rate=15.0, hours=0.0, team_size=None):
    return TaskResource(name=name, type=type, units=units, rate=rate, hours=hours, team_size=team_size)


def make_task(uid, start, finish, workers=0, phase='structure', predecessors=None,
              cost=1000.0, material_cost=400.0, is_summary=False, name=None,
              resources=None, duration_days=None, duration_hours=None):
    """
    Build a ScheduleTask.

    workers: labor units on a single labor resource (0 = no labor).
    predecessors: list of uids (FS) or (uid, type) tuples.
    """
    if resources is None:
        resources = [make_resource(workers)] if workers else []
    preds = []
    for p in predecessors or []:
        if isinstance(p, tuple):
            preds.append(Predecessor(uid=p[0], type=p[1]))
        else:
            preds.append(Predecessor(uid=p))
    task = ScheduleTask(
        uid=uid,
        wbs=f"1.{uid}",
        name=name or f"Tarefa {uid}",
        duration_days=0,
        duration_hours=0.0,
        start_date=start,
        finish_date=finish,
        predecessors=preds,
        phase=phase,
        resources=resources,
        cost=cost,
        material_cost=material_cost,
        is_summary=is_summary,
    )
    span = task.span_days()
    task.duration_days = span if duration_days is None else duration_days
    task.duration_hours = span * 8.0 if duration_hours is None else duration_hours
    return task


def make_schedule(tasks, critical_path=None, start=None, finish=None, name='Moradia T3'):
    work = [t for t in tasks if not t.is_summary] or tasks
    if start is None and work:
        start = min(t.start_date for t in work)
    if finish is None and work:
        finish = max(t.finish_date for t in work)
    return ProjectSchedule(
        project_name=name,
        start_date=start,
        finish_date=finish,
        tasks=list(tasks),
        critical_path=list(critical_path or []),
    )


@pytest.fixture
def no_rules_constraints():
    """Capacity-only constraints (no equipment or phase rules)."""
    return Constraints(max_workers_per_floor=20)


@pytest.fixture
def crane_constraints():
    return Constraints(
        max_workers_per_floor=20,
        equipment_conflicts=[EquipmentConflict('crane', 1, ['earthworks', 'foundations'])],
    )


@pytest.fixture
def curing_rule():
    return PhaseOverlapRule(
        'structure', 'waterproofing', False, 7,
        "Betão deve curar antes de impermeabilizar (mínimo 7 dias)",
    )


@pytest.fixture
def mixed_schedule():
    """
    Small house schedule with a crane clash, a curing gap violation and a
    labor peak.
    """
    tasks = [
        make_task(1, '2026-03-01', '2026-03-05', workers=4, phase='earthworks', name='Escavação'),
        make_task(2, '2026-03-03', '2026-03-08', workers=6, phase='foundations', predecessors=[1],
                  name='Sapatas'),
        make_task(3, '2026-03-09', '2026-03-20', workers=12, phase='structure', predecessors=[2],
                  name='Estrutura betão armado'),
        make_task(4, '2026-03-15', '2026-03-22', workers=10, phase='rough_in_plumbing',
                  predecessors=[(3, 'SS')], name='Tubagens'),
        make_task(5, '2026-03-18', '2026-03-25', workers=3, phase='waterproofing', predecessors=[3],
                  name='Impermeabilização cobertura'),
        make_task(6, '2026-03-10', '2026-03-14', workers=5, phase='site_setup', name='Estaleiro'),
        make_task(7, '2026-03-28', '2026-04-03', workers=4, phase='external_finishes',
                  predecessors=[5], name='Reboco exterior'),
    ]
    summary = make_task(100, '2026-03-01', '2026-04-03', workers=50, phase='structure',
                        is_summary=True, name='Obra')
    return make_schedule([summary] + tasks, critical_path=[1, 2, 3])


@pytest.fixture
def schedule_json(tmp_path):
    """Write a camelCase schedule JSON file and return its path."""
    data = {
        'projectName': 'Moradia T3',
        'startDate': '2026-03-01',
        'finishDate': '2026-03-20',
        'totalDurationDays': 19,
        'totalCost': 50000,
        'criticalPath': [1],
        'tasks': [
            {
                'uid': 1, 'wbs': '1.1', 'name': 'Escavação', 'durationDays': 5,
                'durationHours': 40, 'startDate': '2026-03-01T00:00:00',
                'finishDate': '2026-03-05', 'predecessors': [], 'phase': 'earthworks',
                'resources': [{'name': 'Servente', 'type': 'labor', 'units': 4, 'rate': 12, 'hours': 160}],
                'cost': 5000, 'materialCost': 0, 'outlineLevel': 2, 'percentComplete': 0,
                'isSummary': False,
            },
            {
                'uid': 2, 'wbs': '1.2', 'name': 'Sapatas', 'durationDays': 6,
                'durationHours': 48, 'startDate': '2026-03-03', 'finishDate': '2026-03-08',
                'predecessors': [{'uid': 1, 'type': 'FS'}], 'phase': 'foundations',
                'resources': [
                    {'name': 'Pedreiro', 'type': 'labor', 'units': 10, 'rate': 15, 'hours': 480},
                    {'name': 'Betão C25/30', 'type': 'material', 'units': 30, 'rate': 90},
                ],
                'cost': 12000, 'materialCost': 2700, 'outlineLevel': 2, 'percentComplete': 0,
                'isSummary': False,
            },
            {
                'uid': 3, 'wbs': '1.3', 'name': 'Estrutura', 'durationDays': 10,
                'durationHours': 80, 'startDate': '2026-03-05', 'finishDate': '2026-03-14',
                'predecessors': [], 'phase': 'structure',
                'resources': [
                    {'name': 'Empreiteiro estrutura', 'type': 'subcontractor', 'units': 1,
                     'rate': 0, 'hours': 0, 'teamSize': 12},
                ],
                'cost': 30000, 'materialCost': 18000, 'outlineLevel': 2, 'percentComplete': 0,
                'isSummary': False,
            },
            {
                'uid': 4, 'wbs': '1.4', 'name': 'Impermeabilização', 'durationDays': 4,
                'durationHours': 32, 'startDate': '2026-03-15', 'finishDate': '2026-03-18',
                'predecessors': [{'uid': 3, 'type': 'FS'}], 'phase': 'waterproofing',
                'resources': [], 'cost': 3000, 'materialCost': 1200, 'outlineLevel': 2,
                'percentComplete': 0, 'isSummary': False,
            },
        ],
    }
    path = tmp_path / 'schedule.json'
    path.write_text(json.dumps(data, ensure_ascii=False), encoding='utf-8')
    return path
