"""
Unit tests for schedule export.
"""

import json

from yoga_booking.models.lesson import LessonMode
from yoga_booking.utils.file_utils import (
    SCHEDULE_COLUMNS,
    export_schedule,
    lessons_to_dataframe,
    save_json,
)


LESSONS = [
    {
        "id": 1,
        "date": "10月20日周一",
        "time": "10:00-11:00",
        "mode": LessonMode.CANCEL_ELIGIBLE,
        "label": "取消预约",
        "peoples": 10,
        "users": [{"open_id": "oXy1AbCd", "reservation_id": 55}],
        "reservation_id": 55,
    },
    {
        "id": 2,
        "date": "10月20日周一",
        "time": "18:30-19:30",
        "mode": LessonMode.BOOKABLE,
        "label": "预约",
        "peoples": 8,
        "users": [],
    },
]


class TestLessonsToDataframe:

    def test_one_row_per_lesson(self):
        df = lessons_to_dataframe(LESSONS)

        assert list(df.columns) == SCHEDULE_COLUMNS
        assert len(df) == 2

    def test_roster_reduced_to_count(self):
        df = lessons_to_dataframe(LESSONS)

        assert df["booked"].tolist() == [1, 0]
        assert "users" not in df.columns

    def test_mode_as_wire_integer(self):
        df = lessons_to_dataframe(LESSONS)

        assert df["mode"].tolist() == [64, 32]

    def test_empty(self):
        df = lessons_to_dataframe([])

        assert df.empty
        assert list(df.columns) == SCHEDULE_COLUMNS


class TestExport:

    def test_save_json_creates_parent(self, tmp_path):
        path = tmp_path / "nested" / "data.json"

        assert save_json({"label": "预约"}, path)
        assert json.loads(path.read_text(encoding="utf-8")) == {"label": "预约"}

    def test_export_schedule_writes_both_formats(self, tmp_path):
        written = export_schedule(LESSONS, tmp_path, "schedule_20251020")

        assert written["json"] == tmp_path / "schedule_20251020.json"
        assert written["csv"] == tmp_path / "schedule_20251020.csv"

        data = json.loads(written["json"].read_text(encoding="utf-8"))
        assert [row["id"] for row in data["lessons"]] == [1, 2]
        assert data["lessons"][0]["label"] == "取消预约"

        csv_text = written["csv"].read_text(encoding="utf-8")
        assert csv_text.splitlines()[0] == ",".join(SCHEDULE_COLUMNS)
        assert "oXy1AbCd" not in csv_text
