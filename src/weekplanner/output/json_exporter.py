"""JSON export of generated schedules."""

import json
import logging
from pathlib import Path
from typing import Union

from weekplanner.domain.models import GeneratedSchedule

logger = logging.getLogger(__name__)

SCHEDULE_FILENAME = "schedule.json"


class JSONExporter:
    """Writes a GeneratedSchedule in its camelCase wire shape.

    If ``output_path`` is a directory the file is named ``schedule.json``.
    """

    def __init__(self, indent: int = 2):
        self.indent = indent

    def to_json_string(self, result: GeneratedSchedule) -> str:
        return json.dumps(result.to_dict(), indent=self.indent, ensure_ascii=False)

    def export(self, result: GeneratedSchedule, output_path: Union[str, Path]) -> Path:
        """Write the schedule to disk.

        Returns:
            The path that was written.
        """
        path = Path(output_path)
        if path.is_dir():
            path = path / SCHEDULE_FILENAME
        path.write_text(self.to_json_string(result) + "\n", encoding="utf-8")
        logger.info("Wrote schedule to %s", path)
        return path
