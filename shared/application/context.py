"""
Request Context

Who is acting, in which language, and what time it is. Passed explicitly
into every command handler and service call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, FrozenSet

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore


class Role(str, Enum):
    """Coarse roles consumed from the authentication layer."""
    ADMIN = 'admin'
    EMPLOYEE = 'employee'
    CHILD_OWNER = 'childOwner'


@dataclass(frozen=True)
class Actor:
    """The principal performing an operation."""
    id: str
    roles: FrozenSet[Role] = frozenset()

    @property
    def is_child_owner(self) -> bool:
        return Role.CHILD_OWNER in self.roles

    @property
    def is_employee(self) -> bool:
        return Role.EMPLOYEE in self.roles

    @property
    def is_staff(self) -> bool:
        """Employees and admins may write staff-only fields."""
        return self.is_employee or Role.ADMIN in self.roles


def _default_language() -> str:
    return settings.LANGUAGE_CODE


@dataclass(frozen=True)
class RequestContext:
    actor: Actor
    language: str = field(default_factory=_default_language)
    clock: Callable[[], datetime] = timezone.now

    def now(self) -> datetime:
        return self.clock()
