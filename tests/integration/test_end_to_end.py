"""
End-to-end flow: trial, activation, purchase.
"""
from decimal import Decimal

import pytest

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.commands.validate_license import ValidateLicenseCommand
from core.domain.time_windows import renewal_window, trial_window
from payments.application.commands.record_payment import RecordPaymentCommand


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestTrialToPaidFlow:
    """A shop tries the product, installs it, then buys it."""

    async def test_trial_conversion_keeps_remaining_days(self, services, make_license):
        trial = await make_license(is_free_trial=True)
        assert trial.end_date == trial_window(trial.start_date, 10)

        activation = await services.activate_license.handle(
            ActivateLicenseCommand(license_key=trial.license_key, hardware_id="H1")
        )
        assert activation.success is True
        assert (await services.lifecycle_manager.get(trial.id)).seat_count == 1

        await services.record_payment.handle(
            RecordPaymentCommand(license_id=trial.id, amount="350", payment_type="initial")
        )

        license = await services.lifecycle_manager.get(trial.id)
        assert license.is_free_trial is False
        assert license.free_trial_end_date is None
        assert license.initial_price == Decimal("350")
        assert license.seat_count == 1

        subscription = await services.subscription_repository.find_active_for_license(trial.id)
        assert subscription.end_date == renewal_window(trial.end_date)
        assert license.end_date == subscription.end_date

        validation = await services.validate_license.handle(
            ValidateLicenseCommand(license_key=trial.license_key, hardware_id="H1")
        )
        assert validation.valid is True
        assert validation.expires_at == subscription.end_date

    async def test_converted_trial_skips_trial_sweep(self, services, make_license):
        trial = await make_license(is_free_trial=True)
        await services.payment_service.record_payment(trial.id, "350", "initial")

        report = await services.sweeper.run_trial_sweep(
            now=renewal_window(trial.end_date)
        )

        assert report.processed == 0
