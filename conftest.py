from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest

from apps.bookings.application.command_handlers import (
    CreateBookingCommand,
    CreateBookingHandler,
    UpdateBookingCommand,
)
from apps.children.services import ChildData, ChildService
from apps.configuration.services import SettingsService
from shared.application.context import Actor, RequestContext, Role


@pytest.fixture
def now():
    return datetime(2030, 12, 1, 9, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def at():
    """``at(3)`` is 9:00 UTC on January 3rd, 2031."""

    def make(day: int, hour: int = 9, month: int = 1, year: int = 2031) -> datetime:
        return datetime(year, month, day, hour, 0, tzinfo=dt_timezone.utc)

    return make


@pytest.fixture
def employee():
    return Actor(id="employee-1", roles=frozenset({Role.EMPLOYEE}))


@pytest.fixture
def owner():
    return Actor(id="owner-1", roles=frozenset({Role.CHILD_OWNER}))


@pytest.fixture
def other_owner():
    return Actor(id="owner-2", roles=frozenset({Role.CHILD_OWNER}))


@pytest.fixture
def context_for(now):
    def make(actor: Actor, language: str = "en") -> RequestContext:
        return RequestContext(actor=actor, language=language, clock=lambda: now)

    return make


@pytest.fixture
def employee_context(context_for, employee):
    return context_for(employee)


@pytest.fixture
def owner_context(context_for, owner):
    return context_for(owner)


@pytest.fixture
def daycare_settings(db, employee):
    return SettingsService.save(employee, capacity=2, daily_fee=Decimal("10.00"))


@pytest.fixture
def child(db, employee_context, owner):
    return ChildService().create(ChildData(owner_id=owner.id, name="Ana", type="girl"), employee_context)


@pytest.fixture
def book(daycare_settings, child, employee_context, at):
    """Create a booking for ``child``; defaults to a BOOKED stay Jan 1 - Jan 5."""

    def make(arrival=None, departure=None, *, context=None, **overrides):
        command = CreateBookingCommand(
            child_id=overrides.pop("child_id", child.id),
            owner_id=overrides.pop("owner_id", child.owner_id),
            arrival=arrival or at(1),
            departure=departure or at(5, hour=18),
            **overrides,
        )
        return CreateBookingHandler().handle(command, context or employee_context)

    return make


@pytest.fixture
def update_command():
    """Full-state update command for ``booking`` with ``changes`` applied."""

    def make(booking, **changes) -> UpdateBookingCommand:
        fields = {
            "booking_id": booking.id,
            "child_id": booking.child_id,
            "owner_id": booking.owner_id,
            "arrival": booking.arrival,
            "departure": booking.departure,
            "status": booking.status,
            "owner_notes": booking.owner_notes,
            "employee_notes": booking.employee_notes,
            "photos": list(booking.photos),
        }
        fields.update(changes)
        return UpdateBookingCommand(**fields)

    return make


class RecordingSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_booking_update(self, language, booking):
        if self.fail:
            raise ConnectionError("mail relay unavailable")
        self.sent.append((language, booking))


@pytest.fixture
def sent_notifications(monkeypatch):
    sender = RecordingSender()
    monkeypatch.setattr("apps.bookings.handlers.get_notification_sender", lambda: sender)
    return sender.sent


@pytest.fixture
def failing_sender(monkeypatch):
    sender = RecordingSender(fail=True)
    monkeypatch.setattr("apps.bookings.handlers.get_notification_sender", lambda: sender)
    return sender
