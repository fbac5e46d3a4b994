"""Celery tasks for notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from celery import shared_task  # type: ignore

from shared.domain.exceptions import NotFoundError

from .services import send_booking_update_email as deliver_booking_update

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_booking_update_email")
def send_booking_update_email(booking_id: str, language: str) -> bool:
    """Load the committed booking and email its owner."""
    from apps.bookings.repositories import BookingRepository

    try:
        booking = BookingRepository().find_by_id(UUID(booking_id))
    except NotFoundError:
        logger.warning(f"Booking {booking_id} was deleted before its update email was sent")
        return False

    return deliver_booking_update(booking, language)
