"""
Selection handoff from the availability grid to a booking request.

Selecting a slot does not reserve anything. The chosen time is handed to a
selection sink, which in this application prefills an appointment request
that is rendered into a human-readable message for the shop.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, field_validator

from ..domain.models import Slot


class SelectionSink(Protocol):
    """Receives the start time of a slot the user picked."""

    def on_select(self, slot_time: DateTime) -> None:
        ...


def activate_slot(slot: Slot, sink: SelectionSink) -> bool:
    """
    Forward an activation to ``sink`` if the slot can be booked.

    Activating a past or booked slot is a no-op, not an error.

    Returns:
        True if the sink was called
    """
    if not slot.is_eligible:
        return False
    sink.on_select(slot.time)
    return True


class BookingRequest(BaseModel):
    """Appointment request as filled in on the booking form."""
    name: str = ""
    email: str = ""
    phone: str = ""
    service: str = ""
    notes: str = ""
    preferred_time: Optional[datetime] = None

    @field_validator("name", "email", "phone", "service", "notes")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("preferred_time")
    @classmethod
    def as_pendulum(cls, value: Optional[datetime]) -> Optional[DateTime]:
        return pendulum.instance(value) if value is not None else None

    @classmethod
    def prefilled(cls, slot_time: DateTime) -> "BookingRequest":
        """Empty request with the preferred time taken from a selected slot."""
        return cls(preferred_time=slot_time)

    def missing_fields(self, services: Sequence[str] = ()) -> List[str]:
        """
        Names of fields that still need a value before the request can be sent.

        ``service`` is only required when a service catalog is configured.
        """
        missing = [
            field_name
            for field_name in ("name", "email", "phone")
            if not getattr(self, field_name)
        ]
        if self.email and "@" not in self.email:
            missing.append("email")
        if services and self.service not in services:
            missing.append("service")
        if self.preferred_time is None:
            missing.append("preferred_time")
        return missing


@dataclass(frozen=True)
class BookingMessage:
    subject: str
    body: str
    reply_to: str


def render_booking_message(request: BookingRequest, business_name: str = "") -> BookingMessage:
    """
    Render a complete request into the message sent to the shop.

    Raises:
        ValueError: If required fields are missing
    """
    missing = request.missing_fields()
    if missing:
        raise ValueError(f"Booking request is incomplete: {', '.join(missing)}")

    when = request.preferred_time
    lines = [
        f"Name: {request.name}",
        f"Email: {request.email}",
        f"Phone: {request.phone}",
        f"Preferred date: {when.format('dddd, MMMM D, YYYY')}",
        f"Preferred time: {when.format('h:mm A')}",
    ]
    if request.service:
        lines.append(f"Service: {request.service}")
    if request.notes:
        lines.append(f"Message: {request.notes}")

    subject = f"Appointment request from {request.name}"
    if business_name:
        subject = f"{subject} ({business_name})"

    return BookingMessage(subject=subject, body="\n".join(lines), reply_to=request.email)


class BookingDraftSink:
    """Selection sink that keeps the last selected time as a booking draft."""

    def __init__(self) -> None:
        self.selected_time: Optional[DateTime] = None

    def on_select(self, slot_time: DateTime) -> None:
        self.selected_time = slot_time

    def draft(self) -> Optional[BookingRequest]:
        if self.selected_time is None:
            return None
        return BookingRequest.prefilled(self.selected_time)
