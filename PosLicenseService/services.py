"""
Composition root.

Wires the Django repositories, the shared cache, the notification
channel and the token issuer into the managers and handlers. Celery
tasks, management commands and tests all build their services here.
"""
from dataclasses import dataclass
from typing import Optional

from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.activation_admin_handlers import (
    DeactivateActivationHandler,
    DeactivateAllActivationsHandler,
    ListActivationsHandler,
)
from activations.application.handlers.rollback_activation_handler import RollbackActivationHandler
from activations.application.handlers.seat_handlers import (
    CheckSeatHandler,
    DecrementSeatHandler,
    IncrementSeatHandler,
    SyncSeatHandler,
)
from activations.application.handlers.validate_license_handler import ValidateLicenseHandler
from activations.domain.services import ActivationManager
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.domain.events import EventBus
from core.infrastructure.cache import CachePort
from core.infrastructure.cache_adapters import cache_adapter
from core.infrastructure.events import event_bus as default_event_bus
from core.infrastructure.tokens import JoseTokenIssuer, TokenIssuer
from licenses.application.handlers.generate_license_handler import GenerateLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    ResumeLicenseHandler,
    RevokeLicenseHandler,
    SuspendLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    DashboardStatsHandler,
    GetLicenseStatusHandler,
    SearchLicensesHandler,
)
from licenses.application.services.expiration_sweeper import ExpirationSweeper
from licenses.application.services.license_cache_service import LicenseCacheService
from licenses.application.services.license_query_service import LicenseQueryService
from licenses.domain.services import LicenseLifecycleManager
from licenses.infrastructure.repositories.cached_license_repository import (
    CachedLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from notifications.application.handlers.send_activation_credentials_handler import (
    SendActivationCredentialsHandler,
)
from notifications.application.services.license_notifier import LicenseNotifier
from notifications.infrastructure.channels import build_notification_channel
from notifications.infrastructure.repositories.django_contact_verification_repository import (
    DjangoContactVerificationRepository,
)
from notifications.ports.notification_channel import NotificationChannel
from payments.application.handlers.record_payment_handler import (
    ListPaymentsHandler,
    RecordPaymentHandler,
)
from payments.domain.services import PaymentRenewalService
from payments.infrastructure.repositories.django_payment_repository import DjangoPaymentRepository
from subscriptions.application.handlers.subscription_handlers import (
    CreateSubscriptionHandler,
    ListSubscriptionsHandler,
    RenewSubscriptionHandler,
)
from subscriptions.domain.services import SubscriptionManager
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    DjangoSubscriptionRepository,
)


@dataclass
class Services:
    """Everything a caller of the licensing engine needs."""

    license_repository: CachedLicenseRepository
    subscription_repository: DjangoSubscriptionRepository
    activation_repository: DjangoActivationRepository
    payment_repository: DjangoPaymentRepository
    verification_repository: DjangoContactVerificationRepository
    cache_service: LicenseCacheService
    notifier: LicenseNotifier
    lifecycle_manager: LicenseLifecycleManager
    subscription_manager: SubscriptionManager
    payment_service: PaymentRenewalService
    activation_manager: ActivationManager
    query_service: LicenseQueryService
    sweeper: ExpirationSweeper

    # Façade
    generate_license: GenerateLicenseHandler
    activate_license: ActivateLicenseHandler
    validate_license: ValidateLicenseHandler
    rollback_activation: RollbackActivationHandler
    check_seat: CheckSeatHandler
    increment_seat: IncrementSeatHandler
    decrement_seat: DecrementSeatHandler
    sync_seat: SyncSeatHandler

    # Administration
    get_license_status: GetLicenseStatusHandler
    revoke_license: RevokeLicenseHandler
    suspend_license: SuspendLicenseHandler
    resume_license: ResumeLicenseHandler
    update_license: UpdateLicenseHandler
    search_licenses: SearchLicensesHandler
    dashboard_stats: DashboardStatsHandler
    record_payment: RecordPaymentHandler
    list_payments: ListPaymentsHandler
    renew_subscription: RenewSubscriptionHandler
    create_subscription: CreateSubscriptionHandler
    list_subscriptions: ListSubscriptionsHandler
    deactivate_activation: DeactivateActivationHandler
    deactivate_all_activations: DeactivateAllActivationsHandler
    list_activations: ListActivationsHandler
    send_activation_credentials: SendActivationCredentialsHandler


def build_services(
    cache: Optional[CachePort] = None,
    channel: Optional[NotificationChannel] = None,
    token_issuer: Optional[TokenIssuer] = None,
    event_bus: Optional[EventBus] = None,
) -> Services:
    """
    Build the service graph.

    Args:
        cache: Cache behind license lookups (process-wide adapter by default)
        channel: Notification channel (from settings by default)
        token_issuer: Activation token signer (JOSE by default)
        event_bus: Bus receiving domain events (process-wide bus by default)

    Returns:
        Services bundle
    """
    bus = event_bus or default_event_bus
    cache_service = LicenseCacheService(cache or cache_adapter)

    license_repository = CachedLicenseRepository(DjangoLicenseRepository(), cache_service)
    subscription_repository = DjangoSubscriptionRepository()
    activation_repository = DjangoActivationRepository()
    payment_repository = DjangoPaymentRepository()
    verification_repository = DjangoContactVerificationRepository()

    notifier = LicenseNotifier(channel or build_notification_channel(), verification_repository)

    lifecycle_manager = LicenseLifecycleManager(
        license_repository, subscription_repository, notifier=notifier, event_bus=bus
    )
    subscription_manager = SubscriptionManager(
        subscription_repository,
        license_repository,
        lifecycle_manager=lifecycle_manager,
        notifier=notifier,
    )
    payment_service = PaymentRenewalService(
        payment_repository, license_repository, subscription_repository, event_bus=bus
    )
    activation_manager = ActivationManager(
        license_repository,
        activation_repository,
        subscription_repository,
        token_issuer or JoseTokenIssuer(),
        payment_service=payment_service,
        event_bus=bus,
    )
    query_service = LicenseQueryService(license_repository, activation_repository, cache_service)
    sweeper = ExpirationSweeper(
        subscription_manager,
        lifecycle_manager,
        license_repository,
        subscription_repository,
        notifier=notifier,
    )

    return Services(
        license_repository=license_repository,
        subscription_repository=subscription_repository,
        activation_repository=activation_repository,
        payment_repository=payment_repository,
        verification_repository=verification_repository,
        cache_service=cache_service,
        notifier=notifier,
        lifecycle_manager=lifecycle_manager,
        subscription_manager=subscription_manager,
        payment_service=payment_service,
        activation_manager=activation_manager,
        query_service=query_service,
        sweeper=sweeper,
        generate_license=GenerateLicenseHandler(lifecycle_manager),
        activate_license=ActivateLicenseHandler(activation_manager),
        validate_license=ValidateLicenseHandler(activation_manager),
        rollback_activation=RollbackActivationHandler(activation_manager),
        check_seat=CheckSeatHandler(activation_manager),
        increment_seat=IncrementSeatHandler(activation_manager),
        decrement_seat=DecrementSeatHandler(activation_manager),
        sync_seat=SyncSeatHandler(activation_manager),
        get_license_status=GetLicenseStatusHandler(lifecycle_manager),
        revoke_license=RevokeLicenseHandler(lifecycle_manager),
        suspend_license=SuspendLicenseHandler(lifecycle_manager),
        resume_license=ResumeLicenseHandler(lifecycle_manager),
        update_license=UpdateLicenseHandler(lifecycle_manager),
        search_licenses=SearchLicensesHandler(query_service),
        dashboard_stats=DashboardStatsHandler(query_service),
        record_payment=RecordPaymentHandler(payment_service),
        list_payments=ListPaymentsHandler(payment_service),
        renew_subscription=RenewSubscriptionHandler(subscription_manager),
        create_subscription=CreateSubscriptionHandler(subscription_manager),
        list_subscriptions=ListSubscriptionsHandler(subscription_manager),
        deactivate_activation=DeactivateActivationHandler(activation_manager),
        deactivate_all_activations=DeactivateAllActivationsHandler(activation_manager),
        list_activations=ListActivationsHandler(activation_manager),
        send_activation_credentials=SendActivationCredentialsHandler(license_repository, notifier),
    )
