"""Celery application for the logistics back office.

Workers run the outbox relay (scheduled through ``CELERY_BEAT_SCHEDULE``)
and read every ``CELERY_*`` setting from the Django settings module.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("logistics")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
