"""
Celery configuration for the finance project.

Celery runs the periodic ledger maintenance jobs (nightly balance
reconciliation) outside the request path. Redis is both the message broker
and result backend. Tasks are auto-discovered from installed apps, and the
beat schedule lives in settings.CELERY_BEAT_SCHEDULE.

Usage:
    # Run a worker and the beat scheduler
    celery -A config worker -l info
    celery -A config beat -l info

    # Trigger a reconciliation by hand
    from finance.ledger.tasks import verify_account_balances
    verify_account_balances.delay()

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# finance.ledger.tasks is not an app's top-level tasks module, so list it
app.autodiscover_tasks()
app.autodiscover_tasks(["finance.ledger"])
