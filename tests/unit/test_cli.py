"""
Unit tests for the run_booking command-line script.
"""

from datetime import timezone
from unittest.mock import Mock, patch

import pytest

import run_booking
from yoga_booking.booking.page import BookingOutcome
from yoga_booking.models.lesson import LessonMode
from yoga_booking.models.result import Result


class TestParsing:

    def test_parse_day_utc(self):
        assert run_booking.parse_day("2025-10-20", timezone.utc) == 1760918400

    def test_parse_day_invalid(self):
        with pytest.raises(ValueError, match="Invalid date"):
            run_booking.parse_day("20/10/2025")

    def test_schedule_arguments(self):
        args = run_booking.parse_arguments(
            ["--openid", "oXy1", "schedule", "--date", "2025-10-20", "--export"]
        )

        assert args.command == "schedule"
        assert args.openid == "oXy1"
        assert args.date == "2025-10-20"
        assert args.export

    def test_book_requires_lesson_id(self):
        with pytest.raises(SystemExit):
            run_booking.parse_arguments(["book"])


class TestMain:

    @pytest.fixture
    def page(self):
        page = Mock()
        page.lessons = [{
            "id": 1, "date": "10月20日周一", "time": "10:00-11:00",
            "mode": LessonMode.BOOKABLE, "label": "预约", "peoples": 8, "users": [],
        }]
        page.holiday = False
        page.notice = None
        page.load.return_value = Result.success(page.lessons)
        return page

    def test_schedule(self, page, capsys):
        with patch.object(run_booking, "build_page", return_value=page):
            code = run_booking.main(["schedule"])

        assert code == 0
        assert "10:00-11:00" in capsys.readouterr().out
        page.client.close.assert_called_once()

    def test_schedule_load_failure(self, page, capsys):
        page.load.return_value = Result.failure("Request failed")
        page.lessons = []
        page.holiday = True

        with patch.object(run_booking, "build_page", return_value=page):
            code = run_booking.main(["schedule"])

        assert code == 1
        assert "No lessons available" in capsys.readouterr().out

    def test_schedule_export(self, page, capsys, tmp_path):
        page.selected_time = 1760918400
        page.tz = timezone.utc

        with patch.object(run_booking, "build_page", return_value=page), \
                patch.object(run_booking.config, "_output_dir", tmp_path):
            code = run_booking.main(["--log-level", "INFO", "schedule", "--export"])

        assert code == 0
        assert (tmp_path / "logs").is_dir()
        assert (tmp_path / "schedules" / "schedule_20251020.csv").exists()
        assert "schedule_20251020.json" in capsys.readouterr().out

    def test_book(self, page, capsys):
        page.book.return_value = BookingOutcome.BOOKED
        page.notice = "预约成功"

        with patch.object(run_booking, "build_page", return_value=page):
            code = run_booking.main(["--openid", "oXy1", "book", "--lesson-id", "42"])

        assert code == 0
        page.book.assert_called_once_with(42)
        assert "预约成功" in capsys.readouterr().out

    def test_unbook_failure(self, page):
        page.unbook.return_value = BookingOutcome.FAILED

        with patch.object(run_booking, "build_page", return_value=page):
            code = run_booking.main(["unbook", "--reservation-id", "55"])

        assert code == 1
        page.unbook.assert_called_once_with(55)


class TestDisplaySchedule:

    @pytest.mark.parametrize("lesson", [
        {"date": "10月20日周一", "time": "10:00-11:00", "label": "预约", "peoples": 8},
        {"id": None, "date": "10月20日周一", "time": "10:00-11:00", "label": "预约"},
    ])
    def test_lesson_without_id(self, lesson, capsys):
        run_booking.display_schedule([lesson], holiday=False)

        out = capsys.readouterr().out
        assert "10:00-11:00" in out
        assert "预约" in out

    def test_reservation_line(self, capsys):
        lesson = {
            "id": 7, "date": "10月20日周一", "time": "18:00-19:00", "label": "取消预约",
            "users": [{"open_id": "oXy1", "reservation_id": 55}], "peoples": 8,
            "reservation_id": 55,
        }

        run_booking.display_schedule([lesson], holiday=False)

        out = capsys.readouterr().out
        assert "    7 | 10月20日周一 18:00-19:00" in out
        assert "1/8" in out
        assert "reservation: 55" in out
