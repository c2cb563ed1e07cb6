"""
Integration tests for the management command and Celery tasks that run the sweeps.

These run synchronously: both entry points start their own event loop.
"""
import asyncio
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from core.domain.value_objects import LicenseStatus
from core.infrastructure.locks import single_flight
from core.tasks import (
    expire_subscriptions_task,
    expire_trials_task,
    run_startup_sweeps_task,
    send_expiration_warnings_task,
)
from licenses.application.services.expiration_sweeper import SUBSCRIPTION_JOB


@pytest.fixture
def lapsed_license(make_license):
    now = timezone.now()
    return asyncio.run(
        make_license(start_date=now - timedelta(days=40), end_date=now - timedelta(days=2))
    )


def status_of(services, license):
    return asyncio.run(services.lifecycle_manager.get(license.id)).status


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestRunExpirationSweepCommand:
    """Tests for the run_expiration_sweep command."""

    def test_dry_run(self, services, lapsed_license):
        out = StringIO()

        call_command("run_expiration_sweep", "--dry-run", stdout=out)

        output = out.getvalue()
        assert "DRY RUN" in output
        assert "subscriptions: 1 candidate(s)" in output
        assert "trials: 0 candidate(s)" in output
        assert status_of(services, lapsed_license) == LicenseStatus.ACTIVE

    def test_single_job(self, services, lapsed_license):
        out = StringIO()

        call_command("run_expiration_sweep", "--job", "subscriptions", stdout=out)

        assert "subscriptions: processed 1, notified 0" in out.getvalue()
        assert "trials" not in out.getvalue()
        assert status_of(services, lapsed_license) == LicenseStatus.EXPIRED

    def test_skips_running_job(self, lapsed_license):
        out = StringIO()

        with single_flight(SUBSCRIPTION_JOB):
            call_command("run_expiration_sweep", stdout=out)

        output = out.getvalue()
        assert "Skipped subscriptions" in output
        assert "trials: processed 0" in output


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestSweepTasks:
    """Tests for the scheduled Celery tasks."""

    def test_expire_subscriptions(self, services, lapsed_license):
        result = expire_subscriptions_task()

        assert result == {"job": SUBSCRIPTION_JOB, "processed": 1, "notified": 0}
        assert status_of(services, lapsed_license) == LicenseStatus.EXPIRED

    def test_overlapping_run_skipped(self, lapsed_license):
        with single_flight(SUBSCRIPTION_JOB):
            assert expire_subscriptions_task() is None

    def test_other_tasks(self):
        assert expire_trials_task()["processed"] == 0
        assert send_expiration_warnings_task()["processed"] == 0

    def test_startup_sweeps(self, services, lapsed_license):
        results = run_startup_sweeps_task()

        assert [r["job"] for r in results] == [
            "expire_subscriptions",
            "expire_trials",
            "expiration_warnings",
        ]
        assert results[0]["processed"] == 1
