"""
Notification senders

The booking engine only knows ``send_booking_update(language, booking)``.
Which sender runs is configured with ``DAYCARE_NOTIFICATION_SENDER``.
"""

from __future__ import annotations

import logging
from typing import Protocol

from django.conf import settings  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    def send_booking_update(self, language: str, booking) -> None:
        ...


class CeleryNotificationSender:
    """Queues the booking update email; returns as soon as it is queued."""

    def send_booking_update(self, language: str, booking) -> None:
        from .tasks import send_booking_update_email

        send_booking_update_email.delay(str(booking.id), language)
        logger.info(f"Queued booking update email for {booking.id} ({language})")


def get_notification_sender() -> NotificationSender:
    return import_string(settings.DAYCARE_NOTIFICATION_SENDER)()
