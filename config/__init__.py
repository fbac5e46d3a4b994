"""Django project package for the daycare booking engine."""

# Loading the Celery app here registers shared tasks (the booking update
# email) with it as soon as Django imports the settings.
from .celery import app as celery_app  # noqa: F401

__all__ = ("celery_app",)
