"""Debug text output for schedule analysis.

This module creates a text report to inspect:
- The placements per weekday
- Activities that could not be placed
- Dependency diagnostics and solver statistics
"""

from pathlib import Path
from typing import Optional, Union

from weekplanner.domain.models import Activity, GeneratedSchedule
from weekplanner.domain.timeutils import format_time_range, time_to_decimal


class DebugGenerator:
    """Generates debug text output for a generated schedule.

    Creates human-readable text files showing:
    - Per-day placements in start time order
    - Weekly load histogram
    - Unplaced activities and their candidate slots
    """

    def generate(
        self,
        result: GeneratedSchedule,
        output_path: Union[str, Path],
        activities: Optional[list[Activity]] = None,
    ) -> str:
        """Generate debug text output and save to file.

        Args:
            result: The generated schedule to describe.
            output_path: Path to save the text file.
            activities: Optional input activities. When given, unplaced
                activities are listed with their candidate slots.

        Returns:
            The generated text content.
        """
        content = self._generate_content(result, activities)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(
        self,
        result: GeneratedSchedule,
        activities: Optional[list[Activity]] = None,
    ) -> str:
        """Generate debug text output and return as string."""
        return self._generate_content(result, activities)

    def _generate_content(
        self,
        result: GeneratedSchedule,
        activities: Optional[list[Activity]],
    ) -> str:
        lines = []

        lines.append("=" * 80)
        lines.append("WEEKLY SCHEDULE DEBUG OUTPUT")
        lines.append("=" * 80)
        lines.append(f"Generated at: {result.generated_at}")
        lines.append(f"Algorithm: {result.algorithm.value}")
        lines.append(
            f"Scheduled: {result.scheduled_activities}/{result.total_activities} activities"
        )
        lines.append("")

        # Per-day placements
        lines.append("-" * 80)
        lines.append("PLACEMENTS BY DAY")
        lines.append("-" * 80)

        by_day = result.slots_by_day()
        for day, slots in by_day.items():
            lines.append(f"\n{day.value} ({len(slots)} activities):")
            if not slots:
                lines.append("  (free)")
                continue
            for slot in slots:
                time_str = format_time_range(slot.start_time, slot.end_time)
                lines.append(
                    f"  {time_str:<22} {slot.activity_code:<20} slot {slot.slot_index + 1}"
                )

        lines.append("")

        # Weekly load histogram
        lines.append("-" * 80)
        lines.append("HOURS PER DAY")
        lines.append("-" * 80)

        for day, slots in by_day.items():
            hours = sum(
                time_to_decimal(s.end_time) - time_to_decimal(s.start_time)
                for s in slots
            )
            bar = "#" * round(hours * 2)
            lines.append(f"{day.abbreviation}: {bar or '.'} ({hours:.1f}h)")

        lines.append("")

        # Conflicts
        lines.append("-" * 80)
        lines.append("CONFLICTS")
        lines.append("-" * 80)

        if result.conflicts:
            for message in result.conflicts:
                lines.append(f"  - {message}")
        else:
            lines.append("  None")

        if activities is not None:
            placed = {code.casefold() for code in result.scheduled_codes()}
            unplaced = [a for a in activities if a.key not in placed]
            if unplaced:
                lines.append("\nCandidate slots of unplaced activities:")
                for activity in unplaced:
                    lines.append(f"  {activity.activity_code}:")
                    if not activity.available_slots:
                        lines.append("    (no slots)")
                    for i, slot in enumerate(activity.available_slots):
                        lines.append(f"    {i + 1}. {slot}")

        lines.append("")

        if result.dependency_violations:
            lines.append("-" * 80)
            lines.append("DEPENDENCY VIOLATIONS")
            lines.append("-" * 80)
            for violation in result.dependency_violations:
                lines.append(f"  - {violation}")
            lines.append("")

        # Solver statistics
        lines.append("-" * 80)
        lines.append("SOLVER STATISTICS")
        lines.append("-" * 80)
        stats = result.stats
        lines.append(f"Status: {stats.solver_status}")
        lines.append(f"Nodes explored: {stats.nodes_explored}")
        lines.append(f"Elapsed: {stats.elapsed_seconds:.3f}s")
        if stats.budget_exhausted:
            lines.append("Budget exhausted: schedule is the best found, not proven optimal")

        lines.append("")
        lines.append("=" * 80)
        lines.append("END OF DEBUG OUTPUT")
        lines.append("=" * 80)

        return "\n".join(lines)
