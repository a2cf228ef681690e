"""
Tests for the ScheduleService orchestration layer.
"""

from typing import FrozenSet, List

import pytest

from tutorschedule.domain.exceptions import AppointmentNotFoundError
from tutorschedule.domain.filters import AppointmentFilter
from tutorschedule.domain.intervals import Duration
from tutorschedule.domain.models import Appointment
from tutorschedule.domain.mutations import Applied, FlagChange, RequiresConfirmation
from tutorschedule.services.scheduler import SaveRejection, ScheduleService


class StubStore:
    """Minimal in-memory stub matching AppointmentStoreProtocol."""

    def __init__(self, appointments=None, day_offs=frozenset()):
        self._appointments: List[Appointment] = list(appointments or [])
        self._day_offs: FrozenSet[str] = frozenset(day_offs)
        self.calls: List[str] = []

    def list_appointments(self):
        return list(self._appointments)

    def list_day_offs(self):
        return self._day_offs

    def insert(self, appointment):
        self.calls.append("insert")
        self._appointments.append(appointment)

    def update(self, appointment):
        self.calls.append("update")
        self._appointments = [
            appointment if existing.id == appointment.id else existing
            for existing in self._appointments
        ]

    def delete(self, appointment_id):
        self.calls.append("delete")
        self._appointments = [a for a in self._appointments if a.id != appointment_id]

    def replace_day_offs(self, day_offs):
        self.calls.append("replace_day_offs")
        self._day_offs = frozenset(day_offs)


@pytest.fixture
def morning_lesson():
    return Appointment.book("2024-06-03", "09:00", Duration.ONE_HOUR, student="Анна", subject="Математика")


class TestSaveAppointment:
    """Tests for saving lessons."""

    def test_overlap_rejected(self, morning_lesson):
        """Test that an overlapping booking is refused without writing."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)

        result = service.save_appointment(Appointment.book("2024-06-03", "09:30"))

        assert not result.saved
        assert result.rejection is SaveRejection.CONFLICT
        assert result.conflicts == (morning_lesson,)
        assert "пересечение" in result.message
        assert store.calls == []

    def test_back_to_back_saved(self, morning_lesson):
        """Test that a touching booking is inserted."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)

        result = service.save_appointment(Appointment.book("2024-06-03", "10:00"))

        assert result.saved
        assert store.calls == ["insert"]
        assert len(service.appointments()) == 2

    def test_day_off_rejects_new_booking(self):
        """Test that new bookings on a day off are refused."""
        store = StubStore(day_offs={"2024-06-08"})
        service = ScheduleService(store=store)

        result = service.save_appointment(Appointment.book("2024-06-08", "10:00"))

        assert result.rejection is SaveRejection.DAY_OFF
        assert store.calls == []

    def test_day_off_allows_editing_existing(self):
        """Test that a lesson already on a day off can still be edited."""
        lesson = Appointment.book("2024-06-08", "10:00")
        store = StubStore([lesson], day_offs={"2024-06-08"})
        service = ScheduleService(store=store)

        result = service.save_appointment(lesson.rescheduled(start_time="12:00"), editing_id=lesson.id)

        assert result.saved
        assert store.calls == ["update"]

    def test_move_onto_day_off_rejected(self):
        """Test that moving a lesson onto a day off is refused."""
        lesson = Appointment.book("2024-06-07", "10:00")
        store = StubStore([lesson], day_offs={"2024-06-08"})
        service = ScheduleService(store=store)

        result = service.save_appointment(lesson.rescheduled(day="2024-06-08"), editing_id=lesson.id)

        assert result.rejection is SaveRejection.DAY_OFF
        assert store.calls == []
        assert service.get_appointment(lesson.id).date_key == "2024-06-07"

    def test_edit_keeps_stored_id(self, morning_lesson):
        """Test that an update always targets the lesson being edited."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)
        edited = Appointment.book("2024-06-03", "11:00", student="Анна")

        result = service.save_appointment(edited, editing_id=morning_lesson.id)

        assert result.saved
        assert result.appointment.id == morning_lesson.id
        assert [a.start_time for a in service.appointments()] == ["11:00"]

    def test_edit_unknown_id(self):
        """Test that editing a missing lesson raises."""
        service = ScheduleService(store=StubStore())

        with pytest.raises(AppointmentNotFoundError):
            service.save_appointment(Appointment.book("2024-06-03", "10:00"), editing_id="missing")

    def test_outside_window_rejected(self):
        """Test that a lesson running past closing time is refused."""
        service = ScheduleService(store=StubStore())

        result = service.save_appointment(Appointment.book("2024-06-03", "21:30"))

        assert result.rejection is SaveRejection.OUTSIDE_WINDOW

    def test_edit_does_not_conflict_with_itself(self, morning_lesson):
        """Test extending a lesson over its own previous slot."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)

        result = service.save_appointment(
            morning_lesson.rescheduled(duration=Duration.TWO_HOURS),
            editing_id=morning_lesson.id,
        )

        assert result.saved
        assert service.get_appointment(morning_lesson.id).end_time == "11:00"


class TestWeekView:
    """Tests for building filtered week views."""

    def test_filter_applied_before_build(self, morning_lesson):
        """Test that filtered-out lessons leave their slots free."""
        other = Appointment.book("2024-06-03", "12:00", student="Иван")
        service = ScheduleService(store=StubStore([morning_lesson, other]))

        view = service.week_view("2024-06-03", AppointmentFilter(student="Иван"))

        assert view.slot("2024-06-03", "09:00").is_free
        assert view.slot("2024-06-03", "12:00").appointment == other

    def test_day_offs_from_store(self):
        """Test that days off come from the store."""
        service = ScheduleService(store=StubStore(day_offs={"2024-06-05"}))

        view = service.week_view("2024-06-03")

        assert view.day("2024-06-05").is_day_off


class TestTwoPhaseChanges:
    """Tests for changes that need confirmation."""

    def test_simple_flag_change_is_stored(self, morning_lesson):
        """Test that a harmless tick is stored immediately."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)

        proposal = service.change_flag(morning_lesson.id, FlagChange.COMPLETE)

        assert isinstance(proposal, Applied)
        assert store.calls == ["update"]
        assert service.get_appointment(morning_lesson.id).is_completed

    def test_uncomplete_waits_for_confirmation(self):
        """Test that unticking completed is stored only after commit."""
        lesson = Appointment.book("2024-06-03", "09:00", is_completed=True, is_paid=True)
        store = StubStore([lesson])
        service = ScheduleService(store=store)

        proposal = service.change_flag(lesson.id, FlagChange.UNCOMPLETE)

        assert isinstance(proposal, RequiresConfirmation)
        assert store.calls == []

        updated = service.commit_flag_change(proposal)

        assert not updated.is_paid
        assert not service.get_appointment(lesson.id).is_completed

    def test_delete(self, morning_lesson):
        """Test the delete round trip."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)

        request = service.propose_delete(morning_lesson.id)
        assert store.calls == []

        service.commit_delete(request)

        assert service.appointments() == []

    def test_delete_unknown(self):
        """Test proposing to delete a missing lesson."""
        service = ScheduleService(store=StubStore())

        with pytest.raises(AppointmentNotFoundError):
            service.propose_delete("missing")

    def test_day_off_round_trip(self, morning_lesson):
        """Test marking a day with lessons as a day off."""
        store = StubStore([morning_lesson])
        service = ScheduleService(store=store)

        proposal = service.propose_day_off("2024-06-03", True)

        assert isinstance(proposal, RequiresConfirmation)
        assert service.commit_day_off(proposal) == frozenset({"2024-06-03"})
        assert service.day_offs() == frozenset({"2024-06-03"})
        assert service.appointments() == [morning_lesson]


class TestChoicesAndExport:
    """Tests for filter choices and export."""

    def test_students_and_subjects(self, morning_lesson):
        """Test the choice lists."""
        service = ScheduleService(store=StubStore([morning_lesson, Appointment.book("2024-06-04", "10:00", student="Иван")]))

        assert service.students() == ["Анна", "Иван"]
        assert service.subjects() == ["Математика"]

    def test_export(self, morning_lesson, tmp_path):
        """Test exporting a date range to a file."""
        service = ScheduleService(store=StubStore([morning_lesson]))

        path = service.export("2024-06-01", "2024-06-30", tmp_path / "june.csv")

        assert path.exists()
        assert "Анна" in path.read_text(encoding="utf-8")
