import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("daycare")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Dedicated queue for owner emails
app.conf.task_routes = {
    "notifications.*": {"queue": "notifications"},
}
