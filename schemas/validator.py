"""
Column and dtype checks for the optimizer's CSV exports.

The Gantt export and the dashboards read these files by column name, so a
file may gain columns but never lose or retype one. Checks work on pandas
dtypes, not row values: a frame passes when every schema column is present
and its dtype can hold what the schema declares.
"""

import typing
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type

import pandas as pd
from pandas.api import types as ptypes
from pydantic import BaseModel

# Schema type -> dtypes pandas may infer for it when reading a CSV back.
# Nullable ints come back as float, header-only files as object, all-empty
# columns as float, and ';'-joined uid lists holding one uid as int.
READ_BACK_TYPES: Dict[str, frozenset] = {
    'int': frozenset({'int', 'float', 'str'}),
    'float': frozenset({'float', 'int', 'str'}),
    'bool': frozenset({'bool', 'str'}),
    'str': frozenset({'str', 'int', 'float'}),
    'datetime': frozenset({'datetime', 'str'}),
}


class SchemaValidationError(Exception):
    """A frame does not match its registered schema."""

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        type_mismatches: Optional[Dict[str, Tuple[str, str]]] = None,
        extra_columns: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.missing_columns = list(missing_columns or [])
        self.type_mismatches = dict(type_mismatches or {})
        self.extra_columns = list(extra_columns or [])


@dataclass
class SchemaReport:
    """Differences between a frame and a schema."""

    missing: List[str] = field(default_factory=list)
    mismatches: Dict[str, Tuple[str, str]] = field(default_factory=dict)
    extra: List[str] = field(default_factory=list)

    def errors(self, strict: bool = False) -> List[str]:
        messages = []
        if self.missing:
            messages.append(f"Missing required columns: {self.missing}")
        if strict and self.extra:
            messages.append(f"Unexpected columns (strict mode): {self.extra}")
        if self.mismatches:
            detail = '; '.join(
                f"{col}: got {got}, expected {expected}"
                for col, (got, expected) in self.mismatches.items()
            )
            messages.append(f"Type mismatches: {detail}")
        return messages


def pandas_dtype_to_python_type(dtype) -> str:
    """Collapse a pandas dtype to 'bool', 'int', 'float', 'datetime' or 'str'."""
    if isinstance(dtype, str):
        dtype = ptypes.pandas_dtype(dtype)
    if ptypes.is_bool_dtype(dtype):
        return 'bool'
    if ptypes.is_integer_dtype(dtype):
        return 'int'
    if ptypes.is_float_dtype(dtype):
        return 'float'
    if ptypes.is_datetime64_any_dtype(dtype):
        return 'datetime'
    if ptypes.is_object_dtype(dtype) or ptypes.is_string_dtype(dtype):
        return 'str'
    return str(dtype)


def pydantic_type_to_string(annotation) -> str:
    """
    Collapse a field annotation to the same vocabulary.

    Optional[X] and X | None map to X.
    """
    args = [a for a in typing.get_args(annotation) if a is not type(None)]
    if typing.get_origin(annotation) is not None and len(args) == 1:
        annotation = args[0]

    name = getattr(annotation, '__name__', str(annotation)).lower()
    if name in ('date', 'datetime'):
        return 'datetime'
    return name


def types_compatible(pandas_type: str, pydantic_type: str) -> bool:
    """True if a column read as pandas_type can hold pydantic_type values."""
    if pandas_type == pydantic_type:
        return True
    return pandas_type in READ_BACK_TYPES.get(pydantic_type, ())


def schema_columns(schema: Type[BaseModel]) -> Dict[str, str]:
    """Map CSV column name (alias when set) -> simplified field type."""
    return {
        info.alias or name: pydantic_type_to_string(info.annotation)
        for name, info in schema.model_fields.items()
    }


def compare_dataframe(df: pd.DataFrame, schema: Type[BaseModel]) -> SchemaReport:
    """Compare a frame's columns and dtypes with a schema."""
    expected = schema_columns(schema)
    report = SchemaReport(
        missing=sorted(set(expected) - set(df.columns)),
        extra=sorted(set(df.columns) - set(expected)),
    )
    for col, wanted in expected.items():
        if col not in df.columns:
            continue
        got = pandas_dtype_to_python_type(df[col].dtype)
        if not types_compatible(got, wanted):
            report.mismatches[col] = (got, wanted)
    return report


def validate_dataframe(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    strict: bool = False,
) -> List[str]:
    """
    Validate a DataFrame against a Pydantic schema.

    Args:
        df: DataFrame to validate
        schema: Pydantic model class defining expected columns
        strict: If True, extra columns are errors too

    Returns:
        List of validation error messages (empty if valid)
    """
    return compare_dataframe(df, schema).errors(strict)


def validate_output_file(
    file_path: Path,
    schema: Type[BaseModel],
    strict: bool = False,
    sample_rows: int = 100,
) -> List[str]:
    """
    Validate a written CSV file against a schema.

    Dtypes are inferred from the first sample_rows rows.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return validate_dataframe(pd.read_csv(file_path, nrows=sample_rows), schema, strict=strict)


def validated_df_to_csv(
    df: pd.DataFrame,
    file_path: Path,
    strict: bool = False,
    skip_validation: bool = False,
    **to_csv_kwargs,
) -> None:
    """
    Write a DataFrame to CSV after checking it against its registered schema.

    The schema is looked up by file name. Unregistered files are written
    with a UserWarning.

    Raises:
        SchemaValidationError: If the frame does not match; nothing is written

    Example:
        validated_df_to_csv(frames['optimized_tasks'], out / 'optimized_tasks.csv', index=False)
    """
    from .registry import get_schema_for_file, list_registered_files

    file_path = Path(file_path)
    schema = None if skip_validation else get_schema_for_file(file_path.name)

    if schema is None and not skip_validation:
        warnings.warn(
            f"No schema registered for '{file_path.name}' (registered: "
            f"{', '.join(list_registered_files())}); add one to schemas/registry.py",
            UserWarning,
        )

    if schema is not None:
        report = compare_dataframe(df, schema)
        errors = report.errors(strict)
        if errors:
            raise SchemaValidationError(
                f"Schema validation failed for '{file_path.name}':\n"
                + "\n".join(f"  - {e}" for e in errors),
                missing_columns=report.missing,
                type_mismatches=report.mismatches,
                extra_columns=report.extra if strict else [],
            )

    df.to_csv(file_path, **to_csv_kwargs)


def validate_schema_compatibility(
    old_schema: Type[BaseModel],
    new_schema: Type[BaseModel],
) -> List[str]:
    """
    Backward-compatibility violations of new_schema against old_schema.

    Removed or retyped columns are FORBIDDEN; added columns are fine.
    """
    old = schema_columns(old_schema)
    new = schema_columns(new_schema)

    errors = []
    removed = sorted(set(old) - set(new))
    if removed:
        errors.append(f"FORBIDDEN: Removed columns: {removed}")

    for col in sorted(set(old) & set(new)):
        if old[col] != new[col]:
            errors.append(f"FORBIDDEN: Type change for '{col}': {old[col]} → {new[col]}")
    return errors
