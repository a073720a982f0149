"""
Tests for the selection handoff and booking messages.
"""

import random

import pendulum
import pytest

from bookinggrid.domain.classifier import classify_slots
from bookinggrid.domain.models import BusinessHours, TimeRange
from bookinggrid.domain.slot_grid import generate_week_slots
from bookinggrid.services.booking import (
    BookingDraftSink,
    BookingRequest,
    activate_slot,
    render_booking_message,
)


TZ = "America/Chicago"


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


class RecordingSink:
    def __init__(self):
        self.selected = []

    def on_select(self, slot_time):
        self.selected.append(slot_time)


def _random_week(rng: random.Random):
    """A classified week with random 'now' and random busy intervals."""
    monday = _at("2024-11-25 00:00")
    now = monday.add(hours=rng.randrange(0, 7 * 24))
    busy = []
    for _ in range(rng.randrange(0, 12)):
        start = monday.add(minutes=rng.randrange(0, 7 * 24 * 60, 15))
        busy.append(TimeRange(start=start, end=start.add(minutes=rng.choice([15, 30, 60, 90, 180]))))
    slots = generate_week_slots(monday, BusinessHours.reference(), now)
    return classify_slots(slots, busy)


class TestActivateSlot:
    def test_available_slot_reaches_sink(self):
        slots = generate_week_slots(_at("2024-11-27"), BusinessHours.reference(), _at("2024-11-27 10:30"))
        slot = next(s for s in slots if s.time == _at("2024-11-27 11:00"))
        sink = RecordingSink()

        assert activate_slot(slot, sink) is True
        assert sink.selected == [_at("2024-11-27 11:00")]

    def test_booked_and_past_slots_are_no_ops(self):
        slots = generate_week_slots(_at("2024-11-27"), BusinessHours.reference(), _at("2024-11-27 10:30"))
        classified = classify_slots(
            slots,
            [TimeRange(start=_at("2024-11-27 14:00"), end=_at("2024-11-27 15:00"))],
        )
        past = next(s for s in classified if s.time == _at("2024-11-27 09:00"))
        booked = next(s for s in classified if s.time == _at("2024-11-27 14:00"))
        sink = RecordingSink()

        assert activate_slot(past, sink) is False
        assert activate_slot(booked, sink) is False
        assert sink.selected == []

    @pytest.mark.parametrize("seed", range(25))
    def test_ineligible_slots_never_reach_sink(self, seed):
        rng = random.Random(seed)
        slots = _random_week(rng)
        sink = RecordingSink()

        for slot in slots:
            if not slot.is_eligible:
                activate_slot(slot, sink)

        assert len(sink.selected) == 0

    @pytest.mark.parametrize("seed", range(10))
    def test_only_eligible_slots_reach_sink(self, seed):
        rng = random.Random(seed)
        slots = _random_week(rng)
        sink = RecordingSink()

        for slot in slots:
            activate_slot(slot, sink)

        assert sink.selected == [slot.time for slot in slots if not slot.is_past and not slot.is_booked]


class TestBookingDraftSink:
    def test_no_selection_no_draft(self):
        assert BookingDraftSink().draft() is None

    def test_draft_is_prefilled_with_last_selection(self):
        sink = BookingDraftSink()
        sink.on_select(_at("2024-11-27 11:00"))
        sink.on_select(_at("2024-11-27 15:00"))

        draft = sink.draft()

        assert draft.preferred_time == _at("2024-11-27 15:00")
        assert draft.name == ""
        assert set(draft.missing_fields()) == {"name", "email", "phone"}


class TestBookingRequest:
    def _complete(self, **overrides) -> BookingRequest:
        values = dict(
            name="  Jane Doe ",
            email="jane@example.com",
            phone="(555) 123-4567",
            service="brake-service",
            notes="Squeaky front brakes",
            preferred_time=_at("2024-11-27 11:00"),
        )
        values.update(overrides)
        return BookingRequest(**values)

    def test_text_fields_are_stripped(self):
        assert self._complete().name == "Jane Doe"

    def test_complete_request_has_no_missing_fields(self):
        assert self._complete().missing_fields(["oil-change", "brake-service"]) == []

    def test_invalid_email_is_reported(self):
        assert self._complete(email="jane").missing_fields() == ["email"]

    def test_service_must_be_in_catalog(self):
        request = self._complete(service="detailing")

        assert request.missing_fields(["oil-change"]) == ["service"]
        assert request.missing_fields() == []

    def test_missing_time_is_reported(self):
        assert self._complete(preferred_time=None).missing_fields() == ["preferred_time"]


class TestRenderBookingMessage:
    def test_message_contents(self):
        request = BookingRequest(
            name="Jane Doe",
            email="jane@example.com",
            phone="555-1234",
            service="oil-change",
            notes="Blue pickup",
            preferred_time=_at("2024-11-27 14:00"),
        )

        message = render_booking_message(request, "Old Reliable Automotive")

        assert message.subject == "Appointment request from Jane Doe (Old Reliable Automotive)"
        assert message.reply_to == "jane@example.com"
        assert message.body.splitlines() == [
            "Name: Jane Doe",
            "Email: jane@example.com",
            "Phone: 555-1234",
            "Preferred date: Wednesday, November 27, 2024",
            "Preferred time: 2:00 PM",
            "Service: oil-change",
            "Message: Blue pickup",
        ]

    def test_optional_lines_are_omitted(self):
        request = BookingRequest(
            name="Jane Doe",
            email="jane@example.com",
            phone="555-1234",
            preferred_time=_at("2024-11-27 09:00"),
        )

        message = render_booking_message(request)

        assert message.subject == "Appointment request from Jane Doe"
        assert "Service:" not in message.body
        assert "Message:" not in message.body

    def test_incomplete_request_raises(self):
        with pytest.raises(ValueError, match="incomplete: name, email, phone"):
            render_booking_message(BookingRequest.prefilled(_at("2024-11-27 09:00")))
