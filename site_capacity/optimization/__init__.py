"""
Schedule optimization against site capacity.

This module provides:
- Bottleneck-driven task splitting
- Greedy resource leveling within float
- Phase sequencing, equipment and capacity conflict detection
- Localized suggestions and the daily capacity timeline
- The optimize_schedule pipeline
"""

from .splitting import SPLIT_WORKER_THRESHOLD, TaskSplitter, split_task, split_overloaded_tasks
from .leveling import ResourceLeveler, level_resources
from .conflicts import ConflictDetector, detect_conflicts
from .suggestions import generate_suggestions
from .timeline import build_capacity_timeline
from .optimizer import optimize_schedule

__all__ = [
    'SPLIT_WORKER_THRESHOLD',
    'TaskSplitter',
    'split_task',
    'split_overloaded_tasks',
    'ResourceLeveler',
    'level_resources',
    'ConflictDetector',
    'detect_conflicts',
    'generate_suggestions',
    'build_capacity_timeline',
    'optimize_schedule',
]
