"""
Output file name -> row schema.

The exporter validates each CSV against the schema registered for its
file name; files without an entry are written with a warning.
"""

from pathlib import Path
from typing import Dict, Optional, Type

from pydantic import BaseModel

from .optimization import (
    CapacityTimelineRow,
    OptimizedTaskRow,
    ScheduleAdjustmentRow,
    ScheduleBottleneckRow,
)

SCHEMA_REGISTRY: Dict[str, Type[BaseModel]] = {
    'optimized_tasks.csv': OptimizedTaskRow,
    'schedule_adjustments.csv': ScheduleAdjustmentRow,
    'schedule_bottlenecks.csv': ScheduleBottleneckRow,
    'capacity_timeline.csv': CapacityTimelineRow,
}


def get_schema_for_file(file_path: str) -> Optional[Type[BaseModel]]:
    """Schema for a file (full path or bare name), or None if unregistered."""
    return SCHEMA_REGISTRY.get(Path(file_path).name)


def list_registered_files() -> list[str]:
    return sorted(SCHEMA_REGISTRY)
