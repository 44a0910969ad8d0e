"""
Output data schemas for validation.

This module defines Pydantic models for the optimizer's output CSV files to
ensure schema stability and prevent breaking changes to downstream
consumers (Gantt export, dashboards).

Usage:
    from schemas import validate_output_file
    from schemas.optimization import OptimizedTaskRow

    # Validate a file
    errors = validate_output_file('optimized_tasks.csv', OptimizedTaskRow)

    # Or use the registry
    from schemas import SCHEMA_REGISTRY
    schema = SCHEMA_REGISTRY['optimized_tasks.csv']
"""

from .validator import (
    validate_output_file,
    validate_dataframe,
    validated_df_to_csv,
    validate_schema_compatibility,
    SchemaValidationError,
)
from .registry import SCHEMA_REGISTRY, get_schema_for_file

__all__ = [
    'validate_output_file',
    'validate_dataframe',
    'validated_df_to_csv',
    'validate_schema_compatibility',
    'SchemaValidationError',
    'SCHEMA_REGISTRY',
    'get_schema_for_file',
]
