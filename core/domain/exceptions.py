"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.

The hierarchy has five families:
- ValidationError: malformed input, rejected before touching the store
- ConflictError: duplicates and uniqueness collisions
- NotFoundError: unknown key or id
- StateError: operation not allowed in the entity's current state
- DependencyError: an external collaborator failed
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainException):
    """Base exception for malformed input."""

    pass


class ConflictError(DomainException):
    """Base exception for duplicate or colliding records."""

    pass


class NotFoundError(DomainException):
    """Base exception for unknown keys or ids."""

    pass


class StateError(DomainException):
    """Base exception for operations not allowed in the current state."""

    pass


class DependencyError(DomainException):
    """Base exception for failing external collaborators."""

    pass


# Validation


class InvalidLicenseKeyError(ValidationError):
    """Raised when a license key fails the format or checksum check."""

    def __init__(self, message: str = "License key format is invalid"):
        super().__init__(message, code="INVALID_LICENSE_KEY")


class MissingFieldError(ValidationError):
    """Raised when a required field is missing."""

    def __init__(self, message: str = "Required field is missing"):
        super().__init__(message, code="MISSING_FIELD")


class InvalidPaymentError(ValidationError):
    """Raised when a payment carries an invalid amount or type."""

    def __init__(self, message: str = "Payment amount must be greater than 0"):
        super().__init__(message, code="INVALID_PAYMENT")


class InvalidSeatCountError(ValidationError):
    """Raised when a reported seat count is negative."""

    def __init__(self, message: str = "User count cannot be negative"):
        super().__init__(message, code="INVALID_SEAT_COUNT")


# Conflict


class DuplicateLicenseError(ConflictError):
    """Raised when a license already exists for the same contact and location."""

    def __init__(
        self,
        message: str = "A license already exists for this phone number and location",
    ):
        super().__init__(message, code="DUPLICATE_LICENSE")


class LicenseKeyGenerationError(ConflictError):
    """Raised when no unique license key could be generated."""

    def __init__(self, message: str = "Failed to generate a unique license key"):
        super().__init__(message, code="LICENSE_KEY_GENERATION_FAILED")


class DuplicateActivationError(ConflictError):
    """Raised when the (license, hardware) pair is already bound."""

    def __init__(self, message: str = "This device is already activated for this license"):
        super().__init__(message, code="DUPLICATE_ACTIVATION")


class DeviceAlreadyBoundError(ConflictError):
    """Raised when a device is actively bound to a different license."""

    def __init__(
        self,
        message: str = (
            "This device already has a license activated. "
            "Each device can only have one active license."
        ),
    ):
        super().__init__(message, code="DEVICE_ALREADY_BOUND")


class JobAlreadyRunningError(ConflictError):
    """Raised when a scheduled job is already running in this process."""

    def __init__(self, message: str = "Job is already running"):
        super().__init__(message, code="JOB_ALREADY_RUNNING")


# Not found


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License key not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class SubscriptionNotFoundError(NotFoundError):
    """Raised when a subscription is not found."""

    def __init__(self, message: str = "Subscription not found"):
        super().__init__(message, code="SUBSCRIPTION_NOT_FOUND")


class ActivationNotFoundError(NotFoundError):
    """Raised when an activation is not found."""

    def __init__(self, message: str = "Activation not found"):
        super().__init__(message, code="ACTIVATION_NOT_FOUND")


# State


class LicenseRevokedError(StateError):
    """Raised when a license has been revoked."""

    def __init__(self, message: str = "License has been revoked"):
        super().__init__(message, code="LICENSE_REVOKED")


class LicenseSuspendedError(StateError):
    """Raised when a license is suspended."""

    def __init__(self, message: str = "License is currently suspended"):
        super().__init__(message, code="LICENSE_SUSPENDED")


class LicenseExpiredError(StateError):
    """Raised when a license or its subscription has expired."""

    def __init__(self, message: str = "License subscription has expired", expires_at=None):
        super().__init__(message, code="LICENSE_EXPIRED")
        self.expires_at = expires_at


class LocationNotSetError(StateError):
    """Raised when activation is attempted before location details exist."""

    def __init__(
        self,
        message: str = (
            "License does not have location information. "
            "Please contact administrator."
        ),
    ):
        super().__init__(message, code="LOCATION_NOT_SET")


class ProductMismatchError(StateError):
    """Raised when the caller's product tag differs from the license's."""

    def __init__(self, message: str = "This license is not valid for this application"):
        super().__init__(message, code="PRODUCT_MISMATCH")


class LocationMismatchError(StateError):
    """Raised when a validation's location differs from the recorded one."""

    def __init__(self, message: str = "Location address does not match the activated location"):
        super().__init__(message, code="LOCATION_MISMATCH")


class SeatLimitExceededError(StateError):
    """Raised when license seat limit is exceeded."""

    def __init__(self, message: str = "License seat limit exceeded"):
        super().__init__(message, code="SEAT_LIMIT_EXCEEDED")


class SeatCountUnderflowError(StateError):
    """Raised when decrementing a seat count that is already zero."""

    def __init__(self, message: str = "User count is already at 0. Cannot decrement further."):
        super().__init__(message, code="SEAT_COUNT_UNDERFLOW")


class InitialPaymentExistsError(StateError):
    """Raised when a second initial payment is recorded."""

    def __init__(self, message: str = "License already has an initial payment"):
        super().__init__(message, code="INITIAL_PAYMENT_EXISTS")


class InitialPaymentRequiredError(StateError):
    """Raised when a payment requires an initial payment that does not exist."""

    def __init__(self, message: str = "An initial payment is required first"):
        super().__init__(message, code="INITIAL_PAYMENT_REQUIRED")


class InvalidLicenseStatusError(StateError):
    """Raised when a license operation is invalid for the current status."""

    def __init__(self, message: str = "Invalid license status"):
        super().__init__(message, code="INVALID_LICENSE_STATUS")


class InvalidSubscriptionStatusError(StateError):
    """Raised when a subscription transition is invalid for its status."""

    def __init__(self, message: str = "Invalid subscription status"):
        super().__init__(message, code="INVALID_SUBSCRIPTION_STATUS")


# Dependency


class NotificationDeliveryError(DependencyError):
    """Raised by channels that fail to hand a message to their gateway."""

    def __init__(self, message: str = "Notification delivery failed"):
        super().__init__(message, code="NOTIFICATION_DELIVERY_FAILED")
