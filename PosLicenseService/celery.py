"""
Celery configuration for background tasks.

Runs the scheduled expiration sweeps and one catch-up run at worker start.
"""
import logging
import os

from celery import Celery
from celery.signals import worker_ready

# Set default Django settings module
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "PosLicenseService.settings.dev")

app = Celery("PosLicenseService")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

logger = logging.getLogger(__name__)


@worker_ready.connect
def run_startup_sweeps(sender=None, **kwargs):
    """Queue one run of every sweep when a worker comes up."""
    from core.tasks import run_startup_sweeps_task

    run_startup_sweeps_task.delay()
    logger.info("Queued startup expiration sweeps")
