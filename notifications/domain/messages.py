"""
Customer message templates.

Plain-text bodies suitable for chat-style channels. Rendering is pure;
delivery happens elsewhere.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

DEFAULT_CUSTOMER_NAME = "Valued Customer"
RULE = "━" * 32


@dataclass(frozen=True)
class Pricing:
    """Prices quoted to trial customers."""

    initial_price: Decimal
    annual_price: Decimal
    price_per_seat: Decimal


def format_date(moment: datetime) -> str:
    """Render a date like ``January 5, 2026``."""
    return f"{moment:%B} {moment.day}, {moment.year}"


def _money(amount: Decimal) -> str:
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return f"${int(amount)}"
    return f"${amount:.2f}"


def _pricing_block(pricing: Pricing) -> str:
    return (
        "💰 Pricing:\n"
        f"• Initial License: {_money(pricing.initial_price)}\n"
        f"• Annual Subscription: {_money(pricing.annual_price)}/year\n"
        f"• Additional Users: {_money(pricing.price_per_seat)}/user\n"
    )


def _footer(product: str) -> str:
    return (
        "If you have any questions or need assistance, please contact our support team.\n\n"
        f"This is an automated message from {product}."
    )


def render_activation_credentials(
    product: str,
    customer_name: Optional[str],
    username: str,
    password: str,
    license_key: str,
    location_name: str,
    location_address: str,
) -> str:
    """Login credentials created for a freshly activated installation."""
    return (
        f"🎉 Welcome to {product}!\n\n"
        f"Dear {customer_name or DEFAULT_CUSTOMER_NAME},\n\n"
        f"Thank you for activating your {product} license. Your login credentials "
        "have been generated and are ready to use.\n\n"
        "📋 Your Login Credentials:\n"
        f"{RULE}\n"
        f"👤 Username: {username}\n"
        f"🔑 Password: {password}\n"
        f"{RULE}\n\n"
        "⚠️ Important: Please save these credentials in a secure location. "
        f"You will need them to log in to your {product} system.\n\n"
        "📄 License Information:\n"
        f"• License Key: {license_key}\n"
        f"• Location: {location_name}\n"
        f"• Address: {location_address}\n\n"
        "📝 Next Steps:\n"
        f"1. Open the {product} application\n"
        "2. Use the username and password above to log in\n"
        "3. Change your password after first login (recommended)\n"
        "4. Start setting up your store and products\n\n"
        + _footer(product)
    )


def render_license_details(
    product: str,
    customer_name: Optional[str],
    license_key: str,
    location_name: Optional[str],
    location_address: Optional[str],
    is_free_trial: bool,
    expires_at: Optional[datetime] = None,
) -> str:
    """Key and location details sent when a license is created."""
    license_type = "Free Trial License" if is_free_trial else "License"
    expiration = f"\n📅 Expiration Date: {format_date(expires_at)}" if expires_at else ""
    trial_note = (
        f"\n💡 This is a free trial license. To continue using {product} after the "
        "trial period, you can upgrade to a paid license.\n"
        if is_free_trial
        else ""
    )
    return (
        f"🎉 Your {product} {license_type} Has Been Created!\n\n"
        f"Dear {customer_name or DEFAULT_CUSTOMER_NAME},\n\n"
        f"Thank you for creating your {product} {license_type.lower()}. Your license "
        "has been successfully generated and is ready to use.\n\n"
        "📄 Your License Information:\n"
        f"{RULE}\n"
        f"🔑 License Key: {license_key}\n"
        f"📍 Location: {location_name or 'N/A'}\n"
        f"🏠 Address: {location_address or 'N/A'}{expiration}\n"
        f"{RULE}\n\n"
        "⚠️ Important: Please save your license key in a secure location. "
        f"You will need it to activate {product}.\n"
        f"{trial_note}\n"
        + _footer(product)
    )


def _action_text(product: str, is_free_trial: bool) -> str:
    if is_free_trial:
        return f"purchase a full license to continue using {product}"
    return f"renew your license to continue using {product}"


def render_expiration_warning(
    product: str,
    customer_name: Optional[str],
    license_key: str,
    location_name: Optional[str],
    expiration_date: datetime,
    days_remaining: int,
    is_free_trial: bool,
    pricing: Pricing,
) -> str:
    """
    Reminder sent a few days before the subscription ends.

    The headline turns urgent when a day or less remains.
    """
    license_type = "free trial" if is_free_trial else "license"
    emoji = "🚨" if days_remaining <= 1 else "⚠️"
    day_word = "day" if days_remaining == 1 else "days"
    return (
        f"{emoji} Your {product} {license_type.capitalize()} Expires Soon\n\n"
        f"Dear {customer_name or DEFAULT_CUSTOMER_NAME},\n\n"
        f"This is a reminder that your {product} {license_type} will expire in "
        f"{days_remaining} {day_word}.\n\n"
        f"📅 Expiration Date: {format_date(expiration_date)}\n\n"
        "📄 License Information:\n"
        f"• License Key: {license_key}\n"
        f"• Location: {location_name or 'N/A'}\n\n"
        "🔔 Action Required:\n"
        f"To avoid service interruption, please {_action_text(product, is_free_trial)} "
        "before the expiration date.\n\n"
        + (_pricing_block(pricing) + "\n" if is_free_trial else "")
        + _footer(product)
    )


def render_expiration_notice(
    product: str,
    customer_name: Optional[str],
    license_key: str,
    location_name: Optional[str],
    expiration_date: datetime,
    is_free_trial: bool,
    pricing: Pricing,
) -> str:
    """Notice sent once the subscription or trial has ended."""
    license_type = "free trial" if is_free_trial else "license"
    action = _action_text(product, is_free_trial)
    return (
        f"🚨 Your {product} {license_type.capitalize()} Has Expired\n\n"
        f"Dear {customer_name or DEFAULT_CUSTOMER_NAME},\n\n"
        f"Your {product} {license_type} expired on {format_date(expiration_date)}.\n\n"
        f"Your access to {product} has been suspended. To restore access, please "
        f"{action} immediately.\n\n"
        "📄 License Information:\n"
        f"• License Key: {license_key}\n"
        f"• Location: {location_name or 'N/A'}\n\n"
        "🔔 Restore Access:\n"
        f"To restore access to {product}, please {action} as soon as possible.\n\n"
        + (_pricing_block(pricing) + "\n" if is_free_trial else "")
        + _footer(product)
    )
