"""Output generation for schedules (JSON, debug text)."""

from weekplanner.output.debug_generator import DebugGenerator
from weekplanner.output.json_exporter import SCHEDULE_FILENAME, JSONExporter

__all__ = [
    "DebugGenerator",
    "JSONExporter",
    "SCHEDULE_FILENAME",
]
