"""
Schedule optimization output schemas.

These schemas define the structure of the CSV files written by the site
capacity optimizer CLI.

Output Location: {OUTPUT_DATA_DIR}/
"""

from typing import Optional
from pydantic import BaseModel, Field


class OptimizedTaskRow(BaseModel):
    """
    Optimized schedule task.

    File: optimized_tasks.csv
    Records: one per task after splitting, leveling and sequencing
    Purpose: Leveled schedule for Gantt rendering and MS Project export.
    """

    model_config = {'populate_by_name': True}

    # Primary key
    uid: int = Field(description="Task uid (Part 1 keeps the original uid)")

    wbs: str = Field(description="WBS code")
    name: str = Field(description="Task name ('- Parte 1' / '- Parte 2' suffix when split)")
    phase: str = Field(description="Construction phase code")
    start_date: str = Field(description="Start date (YYYY-MM-DD)")
    finish_date: str = Field(description="Finish date (YYYY-MM-DD)")
    duration_days: int = Field(description="Duration in days")
    duration_hours: float = Field(description="Duration in work hours")
    workers: int = Field(description="Workers on site per day (at least 1)")
    cost: float = Field(description="Total task cost (EUR)")
    material_cost: float = Field(description="Material cost (EUR)")
    is_summary: bool = Field(description="WBS summary row")
    is_milestone: bool = Field(description="Zero-duration milestone")
    predecessors: Optional[str] = Field(default=None, description="Predecessor links, e.g. '3FS;7SS'")
    split_from_uid: Optional[int] = Field(default=None, description="Original uid when this task is a Part 2")


class ScheduleAdjustmentRow(BaseModel):
    """
    Date shift applied by the optimizer.

    File: schedule_adjustments.csv
    Records: one per leveling or sequencing shift
    """

    model_config = {'populate_by_name': True}

    task_uid: int = Field(description="Shifted task uid")
    task_name: str = Field(description="Shifted task name")
    original_start: str = Field(description="Start before the shift (YYYY-MM-DD)")
    new_start: str = Field(description="Start after the shift (YYYY-MM-DD)")
    original_finish: str = Field(description="Finish before the shift (YYYY-MM-DD)")
    new_finish: str = Field(description="Finish after the shift (YYYY-MM-DD)")
    shift_days: int = Field(description="Calendar days moved")
    reason: str = Field(description="Localized reason (Nivelamento / Sequenciamento)")


class ScheduleBottleneckRow(BaseModel):
    """
    Remaining or resolved site conflict.

    File: schedule_bottlenecks.csv
    Records: one per phase rule, equipment rule or overload window flagged
    """

    model_config = {'populate_by_name': True}

    kind: str = Field(description="capacity, equipment or phase_sequence")
    reason: str = Field(description="Localized description")
    phases: str = Field(description="Involved phases, ';'-separated")
    start_date: str = Field(description="First affected day (YYYY-MM-DD)")
    finish_date: str = Field(description="Last affected day (YYYY-MM-DD)")
    overload: int = Field(description="Workers or equipment units over the limit")
    severity: str = Field(description="low, medium or high")
    task_uids: Optional[str] = Field(default=None, description="Involved task uids, ';'-separated")
    equipment_name: Optional[str] = Field(default=None, description="Equipment code for equipment conflicts")
    resolved: bool = Field(description="True when sequencing shifts removed the conflict")


class CapacityTimelineRow(BaseModel):
    """
    Daily workforce against site capacity.

    File: capacity_timeline.csv
    Records: one per day with demand
    Purpose: Labor histogram chart.
    """

    model_config = {'populate_by_name': True}

    date: str = Field(description="Day (YYYY-MM-DD)")
    workers_allocated: int = Field(description="Workers on site")
    workers_capacity: int = Field(description="Max workers per floor")
    utilization_percent: float = Field(description="Allocated / capacity * 100")
    is_bottleneck: bool = Field(description="Allocated exceeds capacity")
    phases: Optional[str] = Field(default=None, description="Workers per phase, e.g. 'structure:12;roof:4'")
    equipment: Optional[str] = Field(
        default=None,
        description="Shared equipment in use as name:count/max, e.g. 'crane:2/1;scaffolding:1/2'",
    )
