"""
Django management command to run the expiration sweeps by hand.

Runs the same jobs as the Celery schedule, under the same job locks.
"""

import asyncio
import logging

from django.core.management.base import BaseCommand

from core.domain.exceptions import JobAlreadyRunningError
from PosLicenseService.services import build_services

logger = logging.getLogger(__name__)

JOBS = ("subscriptions", "trials", "warnings", "all")


class Command(BaseCommand):
    """Command to expire subscriptions and trials and send warnings."""

    help = "Run the subscription, trial and warning sweeps"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--job",
            choices=JOBS,
            default="all",
            help="Sweep to run (default: all, in schedule order)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - report candidates without changing anything",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        job = options["job"]
        dry_run = options["dry_run"]
        sweeper = build_services().sweeper

        runs = {
            "subscriptions": sweeper.run_subscription_sweep,
            "trials": sweeper.run_trial_sweep,
            "warnings": sweeper.run_warning_sweep,
        }
        selected = list(runs) if job == "all" else [job]

        if dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))

        for name in selected:
            try:
                report = asyncio.run(runs[name](dry_run=dry_run))
            except JobAlreadyRunningError as e:
                # pylint: disable=no-member
                self.stdout.write(self.style.WARNING(f"Skipped {name}: {e.message}"))
                continue

            if dry_run:
                self.stdout.write(f"{name}: {report.processed} candidate(s)")
            else:
                self.stdout.write(
                    # pylint: disable=no-member
                    self.style.SUCCESS(
                        f"{name}: processed {report.processed}, notified {report.notified}"
                    )
                )
