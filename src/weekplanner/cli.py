"""Command-line interface for the weekly activity planner."""

import argparse
import logging
import sys
from typing import Optional

from weekplanner.domain.catalog import ActivityCatalog
from weekplanner.domain.models import Activity, GeneratedSchedule, TimeSlot
from weekplanner.exceptions import InvalidInputError
from weekplanner.logging_setup import configure_logging
from weekplanner.output.debug_generator import DebugGenerator
from weekplanner.output.json_exporter import JSONExporter
from weekplanner.scheduling.scheduler import (
    BACKTRACKING_ACTIVITY_LIMIT,
    Scheduler,
    SchedulerConfig,
    SolverType,
)
from weekplanner.validation.validator import InputValidator, ScheduleValidator

logger = logging.getLogger(__name__)

ALGORITHM_CHOICES = [s.value for s in SolverType]


def create_sample_activities(count: int = 8) -> list[Activity]:
    """Create sample activities for testing.

    Every activity gets two or three candidate slots drawn from a fixed
    rotation, so the same count always produces the same input. Every
    fourth activity's first slot requires the next activity's first slot.

    Args:
        count: Number of activities to create.
    """
    # (days, start, end) rotation loosely modelled on a class timetable
    slot_pool = [
        (["Monday", "Thursday"], "8:00 AM", "9:30 AM"),
        (["Tuesday", "Friday"], "8:00 AM", "9:30 AM"),
        (["Monday", "Thursday"], "9:30 AM", "11:00 AM"),
        (["Tuesday", "Friday"], "9:30 AM", "11:00 AM"),
        (["Wednesday"], "9:00 AM", "12:00 PM"),
        (["Monday", "Thursday"], "1:00 PM", "2:30 PM"),
        (["Tuesday", "Friday"], "1:00 PM", "2:30 PM"),
        (["Saturday"], "8:00 AM", "11:00 AM"),
        (["Monday", "Thursday"], "2:30 PM", "4:00 PM"),
        (["Tuesday", "Friday"], "2:30 PM", "4:00 PM"),
        (["Wednesday"], "1:00 PM", "4:00 PM"),
    ]

    # Sample subject codes
    subjects = ["MATH", "PHYS", "CHEM", "BIO", "HIST", "ENG", "ART", "CS", "ECON", "PE"]

    activities = []
    for i in range(count):
        code = f"{subjects[i % len(subjects)]} {101 + i // len(subjects)}"
        slot_count = 2 + (i % 2)
        slots = tuple(
            TimeSlot.from_strings(*slot_pool[(i * 3 + k * 5) % len(slot_pool)])
            for k in range(slot_count)
        )
        activities.append(Activity(activity_code=code, available_slots=slots))

    # Lab pairing: activity i slot 1 requires activity i+1 slot 1
    for i in range(0, count - 1, 4):
        activities[i] = activities[i].with_dependency(
            0, activities[i + 1].activity_code, 0
        )

    return activities


def build_config(args: argparse.Namespace) -> SchedulerConfig:
    """Map command-line flags onto a SchedulerConfig."""
    config = SchedulerConfig(solver_type=SolverType(args.algorithm))
    if getattr(args, "limit", None) is not None:
        config.backtracking_limit = args.limit
    if getattr(args, "max_nodes", None) is not None:
        config.max_nodes = args.max_nodes or None
    if getattr(args, "time_limit", None) is not None:
        config.time_limit_seconds = args.time_limit
        config.cpsat_time_limit_seconds = args.time_limit
    return config


def print_summary(result: GeneratedSchedule, stats: dict) -> None:
    """Print a short human-readable summary of a run."""
    print(f"\nSchedule generated ({result.algorithm.value})")
    print(f"  Scheduled: {stats['scheduled_activities']}/{stats['total_activities']} activities")
    print(f"  Weekly hours: {stats['weekly_hours']:.1f}")
    if stats["busiest_day"]:
        print(f"  Busiest day: {stats['busiest_day']}")
    print(f"  Search: {result.stats.solver_status}, {result.stats.nodes_explored} nodes")

    for slot in result.schedule:
        days = "/".join(day.abbreviation for day in slot.days)
        print(f"    {slot.activity_code:<12} slot {slot.slot_index + 1}  {days}")

    if result.conflicts:
        print(f"\n  Conflicts ({len(result.conflicts)}):")
        for message in result.conflicts:
            print(f"    - {message}")

    for violation in result.dependency_violations:
        print(f"  ! {violation}")


def report_validation(result: GeneratedSchedule, activities: list[Activity]) -> bool:
    validation = ScheduleValidator().validate(result, activities)
    if validation.is_valid:
        print("\n  Validation: PASSED")
    else:
        print(f"\n  Validation: FAILED ({len(validation.errors)} errors)")
        for error in validation.errors[:5]:
            print(f"    - {error}")
        if len(validation.errors) > 5:
            print(f"    ... and {len(validation.errors) - 5} more errors")
    for warning in validation.warnings:
        print(f"  Warning: {warning}")
    return validation.is_valid


def run_generate(
    input_path: str,
    config: SchedulerConfig,
    output_path: Optional[str] = None,
    report_path: Optional[str] = None,
) -> GeneratedSchedule:
    """Generate a schedule from a JSON file of activities.

    Raises:
        InvalidInputError: If the file can't be read or is malformed.
    """
    try:
        catalog = ActivityCatalog.load(input_path)
    except OSError as exc:
        raise InvalidInputError(f"Cannot read {input_path}: {exc}") from exc
    activities = catalog.activities

    for warning in InputValidator().validate(activities).warnings:
        logger.warning(warning)

    scheduler = Scheduler(config)
    result, stats = scheduler.generate_with_stats(activities)

    print_summary(result, stats)
    report_validation(result, activities)

    if output_path:
        written = JSONExporter().export(result, output_path)
        print(f"\nSchedule written to {written}")
    if report_path:
        DebugGenerator().generate(result, report_path, activities)
        print(f"Debug report written to {report_path}")

    return result


def run_demo(activity_count: int = 8, algorithm: str = "auto") -> GeneratedSchedule:
    """Run a demo schedule generation."""
    print(f"Generating demo schedule for {activity_count} activities...")

    activities = create_sample_activities(activity_count)

    scheduler = Scheduler(SchedulerConfig(solver_type=SolverType(algorithm)))
    result, stats = scheduler.generate_with_stats(activities)

    print_summary(result, stats)
    report_validation(result, activities)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Weekly planner - conflict-free activity scheduling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Run demo with 8 activities
  %(prog)s demo --count 14               Larger demo (switches to greedy)
  %(prog)s demo --algorithm cpsat        Use CP-SAT solver

  %(prog)s generate activities.json                  Print a schedule
  %(prog)s generate activities.json -o out/          Write out/schedule.json
  %(prog)s generate activities.json --report dbg.txt Write a debug report
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write JSON-lines logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a schedule from a JSON activity file"
    )
    generate_parser.add_argument(
        "input",
        type=str,
        help="JSON file with a list of activities",
    )
    generate_parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default="auto",
        choices=ALGORITHM_CHOICES,
        help="Solver: auto (default), backtracking, greedy or cpsat",
    )
    generate_parser.add_argument(
        "--limit", "-l",
        type=int,
        help=f"Largest input solved by backtracking in auto mode "
             f"(default: {BACKTRACKING_ACTIVITY_LIMIT})",
    )
    generate_parser.add_argument(
        "--max-nodes", "-n",
        type=int,
        help="Backtracking node budget, 0 for unlimited (default: 1000000)",
    )
    generate_parser.add_argument(
        "--time-limit", "-t",
        type=float,
        help="Solver time limit in seconds",
    )
    generate_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the schedule JSON here (file or directory)",
    )
    generate_parser.add_argument(
        "--report", "-r",
        type=str,
        help="Write a debug text report here",
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo schedule generation")
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=8,
        help="Number of activities to generate (default: 8)",
    )
    demo_parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default="auto",
        choices=ALGORITHM_CHOICES,
        help="Solver: auto (default), backtracking, greedy or cpsat",
    )

    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_file=args.log_file,
    )

    try:
        if args.command == "generate":
            run_generate(args.input, build_config(args), args.output, args.report)
            return 0
        elif args.command == "demo":
            run_demo(args.count, args.algorithm)
            return 0
        else:
            parser.print_help()
            return 1
    except InvalidInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
