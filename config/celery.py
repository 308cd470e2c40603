"""
Celery configuration for the cloth shop POS.
"""

import os

from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

app = Celery("cloth_shop")

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule for periodic tasks
app.conf.beat_schedule = {
    # Flag pending payments that were never confirmed for manual review
    "flag-stale-pending-orders": {
        "task": "apps.sales.tasks.flag_stale_pending_orders",
        "schedule": 300.0,  # Every 5 minutes (300 seconds)
        "options": {"queue": "billing", "priority": 8},
    },
}

# Task routing configuration
app.conf.task_routes = {
    "apps.sales.tasks.*": {"queue": "billing", "priority": 8},
}
