"""Unit tests for chat context building."""

from app.models.resource import Resource
from app.models.schedule import ScheduleBlock
from app.services.chat import RESOURCE_EXCERPT_LENGTH, build_context_message


def _block(day: int, title: str = "Lecture") -> ScheduleBlock:
    return ScheduleBlock(title=title, day_of_week=day, start_time="09:00", end_time="10:00")


class TestBuildContextMessage:
    def test_nothing_to_say(self):
        assert build_context_message([], []) is None

    def test_timetable_only(self):
        turn = build_context_message([_block(0), _block(6, "Sport")], [])

        assert turn.role == "system"
        assert "Monday 09:00-10:00: Lecture" in turn.content
        assert "Sunday 09:00-10:00: Sport" in turn.content
        assert "Recent resources" not in turn.content

    def test_out_of_range_day_is_labelled(self):
        turn = build_context_message([_block(9)], [])
        assert "Day 9 09:00-10:00" in turn.content

    def test_resource_content_truncated(self):
        resource = Resource(title="Notes", type="note", content="z" * 500, subject="Maths", tags=[])

        turn = build_context_message([], [resource])

        line = next(l for l in turn.content.splitlines() if "[Maths] Notes" in l)
        assert line.endswith(": " + "z" * RESOURCE_EXCERPT_LENGTH)
        assert "Timetable" not in turn.content
