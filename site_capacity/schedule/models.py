"""
Data models for schedule capacity optimization.

Defines dataclasses for schedule tasks, site constraints, and the
optimization report handed to the exporter and dashboard.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .calendar import parse_day, format_day

RELATION_TYPES = ('FS', 'SS', 'FF', 'SF')
RESOURCE_TYPES = ('labor', 'material', 'machinery', 'subcontractor')


@dataclass
class TaskResource:
    """A resource assignment on a task (crew, material or machine)."""

    name: str
    type: str                      # labor, material, machinery, subcontractor
    units: float = 0.0
    rate: float = 0.0              # per hour (labor/machinery) or per unit (material)
    hours: float = 0.0
    team_size: Optional[int] = None   # subcontractor crew size

    def is_labor(self) -> bool:
        return self.type in ('labor', 'subcontractor')


@dataclass
class Predecessor:
    """A logical dependency on another task, referenced by uid."""

    uid: int
    type: str = 'FS'
    lag: float = 0.0

    def is_finish_to_start(self) -> bool:
        return self.type == 'FS'


@dataclass
class ScheduleTask:
    """Represents a WBS schedule task."""

    uid: int
    wbs: str
    name: str
    duration_days: int
    duration_hours: float
    start_date: date
    finish_date: date
    predecessors: list[Predecessor] = field(default_factory=list)
    phase: str = 'cleanup'
    resources: list[TaskResource] = field(default_factory=list)
    cost: float = 0.0
    material_cost: float = 0.0
    outline_level: int = 1
    percent_complete: float = 0.0
    is_summary: bool = False
    is_milestone: bool = False
    notes: Optional[str] = None

    def __post_init__(self):
        """Accept ISO strings for dates."""
        self.start_date = parse_day(self.start_date)
        self.finish_date = parse_day(self.finish_date)

    def span_days(self) -> int:
        """Calendar days covered by the task, both ends inclusive (at least 1)."""
        return max(1, (self.finish_date - self.start_date).days + 1)


@dataclass
class ProjectSchedule:
    """A complete project schedule as produced by the WBS generator."""

    project_name: str
    start_date: Optional[date]
    finish_date: Optional[date]
    total_duration_days: int = 0
    total_cost: float = 0.0
    tasks: list[ScheduleTask] = field(default_factory=list)
    resources: list[dict] = field(default_factory=list)
    critical_path: list[int] = field(default_factory=list)
    team_summary: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.start_date is not None:
            self.start_date = parse_day(self.start_date)
        if self.finish_date is not None:
            self.finish_date = parse_day(self.finish_date)


@dataclass
class ProjectResources:
    """Aggregated project resources (materials, labor trades, equipment)."""

    materials: list[dict] = field(default_factory=list)
    labor: list[dict] = field(default_factory=list)
    equipment: list[dict] = field(default_factory=list)
    total_material_cost: float = 0.0
    total_labor_cost: float = 0.0
    total_labor_hours: float = 0.0
    total_equipment_cost: float = 0.0
    grand_total: float = 0.0


@dataclass
class EquipmentConflict:
    """Shared equipment that only a limited number of tasks may use at once."""

    equipment_name: str
    max_concurrent: int
    phases: list[str] = field(default_factory=list)


@dataclass
class PhaseOverlapRule:
    """Whether phase_b may run alongside phase_a, and the gap required if not."""

    phase_a: str
    phase_b: str
    allow_overlap: bool
    min_gap_days: int = 0
    reason: str = ''


@dataclass
class Constraints:
    """Site capacity constraints applied by the optimizer."""

    max_workers_per_floor: int = 20
    equipment_conflicts: list[EquipmentConflict] = field(default_factory=list)
    phase_overlap_rules: list[PhaseOverlapRule] = field(default_factory=list)


@dataclass
class TaskFloat:
    """Total float of a task and whether it is pinned."""

    task_uid: int
    total_float_days: int
    is_critical: bool


@dataclass
class DateRange:
    """Inclusive range of calendar days."""

    start: date
    finish: date

    def to_dict(self) -> dict:
        return {'start': format_day(self.start), 'finish': format_day(self.finish)}


@dataclass
class Bottleneck:
    """A capacity, equipment or sequencing violation left in the schedule."""

    reason: str
    phases: list[str]
    date_range: DateRange
    kind: str = 'capacity'         # capacity, equipment, phase_sequence
    overload: int = 0
    severity: str = 'medium'       # low, medium, high
    task_uids: list[int] = field(default_factory=list)
    equipment_name: Optional[str] = None
    resolved: bool = False

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'reason': self.reason,
            'phases': list(self.phases),
            'dateRange': self.date_range.to_dict(),
            'overload': self.overload,
            'severity': self.severity,
            'taskUids': list(self.task_uids),
            'equipmentName': self.equipment_name,
            'resolved': self.resolved,
        }


@dataclass
class ScheduleAdjustment:
    """A date shift applied to a task by the optimizer."""

    task_uid: int
    task_name: str
    original_start: date
    new_start: date
    original_finish: date
    new_finish: date
    reason: str

    def shift_days(self) -> int:
        return (self.new_start - self.original_start).days

    def to_dict(self) -> dict:
        return {
            'taskUid': self.task_uid,
            'taskName': self.task_name,
            'originalStart': format_day(self.original_start),
            'newStart': format_day(self.new_start),
            'originalFinish': format_day(self.original_finish),
            'newFinish': format_day(self.new_finish),
            'reason': self.reason,
        }


@dataclass
class TaskSplit:
    """Record of one task split into two dependency-linked parts."""

    original_uid: int
    part2_uid: int
    task_name: str
    workers: int

    def to_dict(self) -> dict:
        return {
            'originalUid': self.original_uid,
            'part2Uid': self.part2_uid,
            'taskName': self.task_name,
            'workers': self.workers,
        }


@dataclass
class OptimizationSuggestion:
    """Human-readable remediation advice."""

    title: str
    description: str
    type: str = 'resource'         # shift, split, sequence, resource
    affected_tasks: list[int] = field(default_factory=list)
    estimated_impact: str = ''

    def to_dict(self) -> dict:
        return {
            'type': self.type,
            'title': self.title,
            'description': self.description,
            'affectedTasks': list(self.affected_tasks),
            'estimatedImpact': self.estimated_impact,
        }


@dataclass
class EquipmentUsage:
    """Tasks using one piece of shared equipment on a day."""

    name: str
    count: int
    max_concurrent: int

    def to_dict(self) -> dict:
        return {'name': self.name, 'count': self.count, 'max': self.max_concurrent}


@dataclass
class CapacityPoint:
    """Worker allocation against capacity on one day."""

    day: date
    workers_allocated: int
    workers_capacity: int
    phases: dict[str, int] = field(default_factory=dict)
    equipment: list[EquipmentUsage] = field(default_factory=list)

    @property
    def utilization_percent(self) -> float:
        if self.workers_capacity <= 0:
            return 0.0
        return self.workers_allocated / self.workers_capacity * 100

    @property
    def is_bottleneck(self) -> bool:
        return self.workers_allocated > self.workers_capacity

    def to_dict(self) -> dict:
        return {
            'date': format_day(self.day),
            'workersAllocated': self.workers_allocated,
            'workersCapacity': self.workers_capacity,
            'utilizationPercent': round(self.utilization_percent, 2),
            'phases': dict(self.phases),
            'equipment': [e.to_dict() for e in self.equipment],
            'isBottleneck': self.is_bottleneck,
        }


@dataclass
class OptimizationResult:
    """Results of a schedule optimization run."""

    original_schedule: ProjectSchedule
    optimized_tasks: list[ScheduleTask]
    bottlenecks: list[Bottleneck]
    adjustments: list[ScheduleAdjustment]
    suggestions: list[OptimizationSuggestion]
    efficiency_gain: float
    original_duration: int
    optimized_duration: int = 0
    splits: list[TaskSplit] = field(default_factory=list)
    capacity_timeline: list[CapacityPoint] = field(default_factory=list)

    def get_task(self, uid: int) -> Optional[ScheduleTask]:
        """Get an optimized task by uid."""
        for task in self.optimized_tasks:
            if task.uid == uid:
                return task
        return None

    def get_bottlenecks(self, kind: str) -> list[Bottleneck]:
        return [b for b in self.bottlenecks if b.kind == kind]

    def get_summary(self) -> str:
        """Get human-readable summary."""
        return (f"{len(self.optimized_tasks)} tasks, {len(self.adjustments)} adjustments, "
                f"{len(self.splits)} splits, {len(self.bottlenecks)} bottlenecks "
                f"({self.efficiency_gain:+.1f}% duration)")

    def to_dict(self) -> dict:
        """Serialize everything except the original schedule reference."""
        from ..data_loader import task_to_dict

        return {
            'projectName': self.original_schedule.project_name,
            'optimizedTasks': [task_to_dict(t) for t in self.optimized_tasks],
            'bottlenecks': [b.to_dict() for b in self.bottlenecks],
            'adjustments': [a.to_dict() for a in self.adjustments],
            'suggestions': [s.to_dict() for s in self.suggestions],
            'splits': [s.to_dict() for s in self.splits],
            'capacityTimeline': [p.to_dict() for p in self.capacity_timeline],
            'efficiencyGain': round(self.efficiency_gain, 4),
            'originalDuration': self.original_duration,
            'optimizedDuration': self.optimized_duration,
        }
