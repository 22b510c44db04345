"""Tests for JSON export and the debug report."""

import json

import pytest

from weekplanner.domain.models import Activity, Dependency, TimeSlot
from weekplanner.output.debug_generator import DebugGenerator
from weekplanner.output.json_exporter import SCHEDULE_FILENAME, JSONExporter
from weekplanner.scheduling.scheduler import Scheduler


@pytest.fixture
def activities():
    return [
        Activity(
            "LEC",
            (TimeSlot.from_strings(["Monday", "Thursday"], "9:00 AM", "10:30 AM"),),
            (Dependency("LEC", 0, "LAB", 0),),
        ),
        Activity("LAB", (TimeSlot.from_strings(["Wednesday"], "1:00 PM", "4:00 PM"),)),
        Activity(
            "SEM",
            (
                TimeSlot.from_strings(["Monday"], "10:00 AM", "11:00 AM"),
                TimeSlot.from_strings(["Thursday"], "9:30 AM", "10:00 AM"),
            ),
        ),
    ]


@pytest.fixture
def result(activities):
    return Scheduler().generate(activities)


class TestJSONExporter:
    """Tests for JSONExporter."""

    def test_export_to_file(self, result, tmp_path):
        path = JSONExporter().export(result, tmp_path / "out.json")
        data = json.loads(path.read_text())

        assert data["algorithm"] == "backtracking"
        assert data["totalActivities"] == 3
        assert data["conflicts"] == ["Could not schedule SEM"]
        assert [s["activityCode"] for s in data["schedule"]] == ["LEC", "LAB"]
        assert data["schedule"][0]["startTime"] == "9:00 AM"
        assert "dependencyViolations" not in data

    def test_export_to_directory(self, result, tmp_path):
        path = JSONExporter().export(result, tmp_path)

        assert path == tmp_path / SCHEDULE_FILENAME
        assert path.exists()

    def test_to_json_string(self, result):
        text = JSONExporter(indent=None).to_json_string(result)

        assert "\n" not in text
        assert json.loads(text) == result.to_dict()


class TestDebugGenerator:
    """Tests for the debug text report."""

    def test_report_sections(self, result):
        content = DebugGenerator().generate_to_string(result)

        assert "WEEKLY SCHEDULE DEBUG OUTPUT" in content
        assert "Scheduled: 2/3 activities" in content
        assert "Monday (1 activities):" in content
        assert "9:00 AM - 10:30 AM" in content
        assert "Could not schedule SEM" in content
        assert "Status: OPTIMAL" in content
        assert "Saturday (0 activities):" in content

    def test_hours_histogram(self, result):
        content = DebugGenerator().generate_to_string(result)

        assert "Wed: ###### (3.0h)" in content
        assert "Sat: . (0.0h)" in content

    def test_unplaced_candidates_listed(self, result, activities):
        content = DebugGenerator().generate_to_string(result, activities)

        assert "Candidate slots of unplaced activities:" in content
        assert "1. Mon 10:00 AM-11:00 AM" in content

    def test_writes_file(self, result, tmp_path):
        path = tmp_path / "report.txt"
        content = DebugGenerator().generate(result, path)

        assert path.read_text(encoding="utf-8") == content
