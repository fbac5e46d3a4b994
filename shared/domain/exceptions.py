"""
Domain Errors

Every error carries a stable machine-readable ``code`` and a ``message_key``
that maps to a translatable message. Callers render ``message`` in the
language of the request; the exception itself never depends on one.
"""

from __future__ import annotations

from django.utils import translation  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


MESSAGES = {
    'errors.forbidden.message': _("Sorry, you don't have access to this resource."),
    'errors.notFound.message': _("Sorry, the record you requested was not found."),
    'errors.validation.message': _("An error occurred while validating the request."),
    'importer.errors.importHashRequired': _("Import hash is required."),
    'importer.errors.importHashExistent': _("Data has already been imported."),
    'entities.booking.validation.arrivalAfterDeparture': _("Departure must be after arrival."),
    'entities.booking.validation.periodPast': _("The booking period must not start in the past."),
    'entities.booking.validation.periodFull': _("There are no places left for the selected period."),
    'entities.child.validation.bookingExists': _("The child can't be deleted because it has bookings."),
}


class DomainError(Exception):
    """Base class for errors surfaced to the caller as-is."""

    code = 'error'
    message_key = 'errors.validation.message'

    def __init__(self, message_key: str | None = None, *, code: str | None = None, **details):
        if message_key is not None:
            self.message_key = message_key
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(f"{self.code}: {self.message_key}")

    def message(self, language: str | None = None) -> str:
        """Render the translated message for ``language``."""
        text = MESSAGES.get(self.message_key, self.message_key)
        if language is None:
            return str(text)
        with translation.override(language):
            return str(text)

    def to_dict(self, language: str | None = None) -> dict:
        return {
            'code': self.code,
            'message_key': self.message_key,
            'message': self.message(language),
        }


class ValidationError(DomainError):
    """Input violates a business rule. Never retried automatically."""

    code = 'validation'


class InvalidPeriod(ValidationError):
    code = 'invalidPeriod'
    message_key = 'entities.booking.validation.arrivalAfterDeparture'


class PastPeriod(ValidationError):
    code = 'pastPeriod'
    message_key = 'entities.booking.validation.periodPast'


class PeriodFull(ValidationError):
    code = 'periodFull'
    message_key = 'entities.booking.validation.periodFull'


class ForbiddenError(DomainError):
    """The acting principal may not perform the requested mutation."""

    code = 'forbidden'
    message_key = 'errors.forbidden.message'


class NotFoundError(DomainError):
    """A referenced entity is absent."""

    code = 'notFound'
    message_key = 'errors.notFound.message'
