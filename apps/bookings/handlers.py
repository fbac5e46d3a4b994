"""Domain event handlers for bookings."""

from __future__ import annotations

import logging

from apps.notifications.senders import get_notification_sender
from shared.application.message_bus import message_bus

from .domain.events import BookingProgressUpdated
from .repositories import BookingRepository

logger = logging.getLogger(__name__)


def send_progress_update(event: BookingProgressUpdated) -> None:
    """Hand the committed booking to the notification sender."""
    booking = BookingRepository().find_by_id(event.booking_id)
    get_notification_sender().send_booking_update(event.language, booking)
    logger.info(f"Progress update for booking {event.booking_id} sent to notifications")


def register_event_handlers(bus=message_bus) -> None:
    bus.register_event_handler(BookingProgressUpdated, send_progress_update)
