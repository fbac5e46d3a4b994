"""Email notification composition and delivery."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils import timezone, translation  # type: ignore
from django.utils.translation import gettext as _  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.domain.entities import Booking

logger = logging.getLogger(__name__)


def send_email_notification(recipient_email: str, subject: str, message: str) -> bool:
    """
    Send a plain-text email.

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False

    logger.info(f"Email sent successfully to {recipient_email}: {subject}")
    return True


def resolve_owner_email(owner_id: str) -> str | None:
    """Email of the user behind an owner reference, if there is one."""
    user_model = get_user_model()
    try:
        user = user_model.objects.filter(pk=owner_id).first()
    except (ValueError, DjangoValidationError):
        logger.warning(f"Owner reference {owner_id!r} is not a user id")
        return None
    return user.email if user and user.email else None


def compose_booking_update(booking: "Booking", language: str) -> tuple[str, str]:
    """Subject and body of the booking update email, in ``language``."""
    with translation.override(language):
        child_name = getattr(booking.child, "name", "") or _("your child")
        subject = _("News about %(child)s's stay") % {"child": child_name}

        lines = [
            _("The daycare team has posted an update about %(child)s.") % {"child": child_name},
            "",
            _("Stay: %(arrival)s - %(departure)s") % {
                "arrival": timezone.localtime(booking.arrival).strftime("%d.%m.%Y %H:%M"),
                "departure": timezone.localtime(booking.departure).strftime("%d.%m.%Y %H:%M"),
            },
        ]
        if booking.employee_notes:
            lines += ["", _("Notes from the team:"), booking.employee_notes]
        if booking.photos:
            lines += ["", _("Photos:")]
            lines += [photo.url or photo.name or photo.id for photo in booking.photos]

    return subject, "\n".join(lines)


def send_booking_update_email(booking: "Booking", language: str) -> bool:
    recipient = resolve_owner_email(booking.owner_id)
    if not recipient:
        logger.warning(f"No email for owner {booking.owner_id}, booking update {booking.id} not sent")
        return False

    subject, message = compose_booking_update(booking, language)
    return send_email_notification(recipient, subject, message)
