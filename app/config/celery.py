"""
Celery configuration for the messaging backend.

Celery runs work that must never hold up a chat request:
- Push notification fan-out after a message is stored

Redis is both broker and result backend. Tasks are auto-discovered from
installed Django apps (``notifications.tasks``).

Usage:
    from notifications.tasks import send_message_notification

    send_message_notification.delay(str(message.id))

https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
