"""
CLI interface for the site capacity optimizer.

Loads a schedule JSON, optimizes it against site capacity, prints a report
and writes the result files.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config.settings import settings
from .data_loader import load_constraints, load_schedule
from .export import export_result
from .optimization import optimize_schedule
from .optimization.timeline import peak_utilization
from .schedule.calendar import format_day
from .schedule.constraints import get_default_constraints
from .schedule.models import OptimizationResult
from .utils.logger import configure_logging

from schemas import SchemaValidationError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure package logging (DEBUG when verbose)."""
    configure_logging('site_capacity', 'DEBUG' if verbose else None)


def print_optimization_report(result: OptimizationResult, top_n: int = 15) -> None:
    """Print a formatted optimization report."""
    schedule = result.original_schedule

    print("=" * 80)
    print("SITE CAPACITY OPTIMIZATION REPORT")
    print("=" * 80)

    print(f"\nProject: {schedule.project_name}")
    print(f"Tasks: {len(schedule.tasks)} -> {len(result.optimized_tasks)}")
    print(f"Original Duration: {result.original_duration} days")
    print(f"Optimized Duration: {result.optimized_duration} days "
          f"({result.efficiency_gain:+.1f}%)")
    print(f"Splits: {len(result.splits)}  Adjustments: {len(result.adjustments)}  "
          f"Bottlenecks: {len(result.bottlenecks)}")

    if result.capacity_timeline:
        peak = max(result.capacity_timeline, key=lambda p: p.workers_allocated)
        overloaded = sum(1 for p in result.capacity_timeline if p.is_bottleneck)
        print(f"Peak Workers: {peak.workers_allocated}/{peak.workers_capacity} "
              f"on {format_day(peak.day)} ({peak_utilization(result.capacity_timeline):.0f}% utilization, "
              f"{overloaded} overloaded days)")

    if result.bottlenecks:
        print("\n--- Bottlenecks ---")
        for b in result.bottlenecks[:top_n]:
            status = " [resolved]" if b.resolved else ""
            print(f"  {b.kind:15s} | {b.severity:6s} | {format_day(b.date_range.start)} .. "
                  f"{format_day(b.date_range.finish)} | {b.reason[:60]}{status}")
        if len(result.bottlenecks) > top_n:
            print(f"  ... and {len(result.bottlenecks) - top_n} more")

    if result.splits:
        print("\n--- Task Splits ---")
        for s in result.splits[:top_n]:
            print(f"  {s.original_uid:5d} -> {s.part2_uid:5d} | {s.workers:3d} workers | {s.task_name[:50]}")

    if result.adjustments:
        print(f"\n--- Adjustments (first {top_n}) ---")
        for a in result.adjustments[:top_n]:
            print(f"  {a.task_uid:5d} | {a.shift_days():+4d}d | {a.task_name[:35]:35s} | {a.reason[:50]}")
        if len(result.adjustments) > top_n:
            print(f"  ... and {len(result.adjustments) - top_n} more")

    print("\n--- Suggestions ---")
    for s in result.suggestions:
        print(f"  [{s.type}] {s.title}")
        print(f"      {s.description}")
        if s.estimated_impact:
            print(f"      Impacto: {s.estimated_impact}")

    print("\n" + "=" * 80)


def run_optimize(
    schedule_file: Path,
    constraints_file: Optional[Path] = None,
    max_workers: Optional[int] = None,
    output_dir: Optional[Path] = None,
    export: bool = True,
) -> OptimizationResult:
    """
    Optimize a schedule file and optionally export the results.

    Args:
        schedule_file: Schedule JSON (camelCase, as written by the WBS generator)
        constraints_file: Constraints JSON (default: built-in constraints)
        max_workers: Override for max_workers_per_floor
        output_dir: Export directory (default: settings.OUTPUT_DATA_DIR)
        export: Write CSV/JSON files

    Returns:
        OptimizationResult
    """
    logger.info(f"Loading {schedule_file}")
    schedule = load_schedule(schedule_file)
    logger.info(f"Loaded {len(schedule.tasks)} tasks")

    constraints = load_constraints(constraints_file) if constraints_file else get_default_constraints()
    if max_workers is not None:
        constraints.max_workers_per_floor = max_workers

    result = optimize_schedule(schedule, constraints=constraints)
    print_optimization_report(result)

    if export:
        written = export_result(result, output_dir or settings.OUTPUT_DATA_DIR)
        print(f"\nOutput: {written['result'].parent}")

    return result


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Optimize a construction schedule against site capacity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default constraints (20 workers/floor, crane x1, pump x1, scaffolding x2)
  python -m site_capacity.cli schedule.json

  # Tighter site and custom output directory
  python -m site_capacity.cli schedule.json --max-workers 15 --output-dir out/

  # Custom constraints, report only
  python -m site_capacity.cli schedule.json --constraints site.json --no-export
""",
    )

    parser.add_argument(
        "schedule_file",
        type=Path,
        help="Schedule JSON file",
    )
    parser.add_argument(
        "--constraints",
        type=Path,
        dest="constraints_file",
        help="Constraints JSON file (default: built-in constraints)",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        dest="max_workers",
        help="Max workers per floor (overrides constraints)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        dest="output_dir",
        help=f"Output directory (default: {settings.OUTPUT_DATA_DIR})",
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Print the report without writing files",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        run_optimize(
            schedule_file=args.schedule_file,
            constraints_file=args.constraints_file,
            max_workers=args.max_workers,
            output_dir=args.output_dir,
            export=not args.no_export,
        )
    except (FileNotFoundError, ValueError, SchemaValidationError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
