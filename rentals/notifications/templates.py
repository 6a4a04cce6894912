"""
Email templates for tenant payment notifications.
"""

from typing import Optional, Union

PAYMENT_NOTIFICATION_SUBJECT = "Notification of payment attached."


def format_minor_units(amount: Optional[Union[int, str]]) -> str:
    """
    Format an amount in cents as dollars.

    Args:
        amount: Amount in minor units (Stripe metadata may send it as a string)

    Returns:
        Dollar string, e.g. ``$1,500.00``; missing or non-numeric input is $0.00
    """
    try:
        cents = int(amount or 0)
    except (TypeError, ValueError):
        cents = 0
    return f"${cents / 100:,.2f}"


def format_payment_notification(
    rent_month: Optional[str],
    rent_amount: Optional[int],
    additional_charges: Optional[int],
    initial_late_fee: Optional[int],
    daily_late_fee: Optional[int],
    status: Optional[str],
) -> str:
    """
    Format the plaintext body of a payment notification.

    Returns:
        Formatted email text
    """
    lines = [
        "Hi there,",
        "",
        "Attached is your notification of payment.",
        "",
        f"Rent Month: {rent_month or 'N/A'}",
        f"Rent Amount: {format_minor_units(rent_amount)}",
        f"Additional Charges: {format_minor_units(additional_charges)}",
        f"Initial Late Fee: {format_minor_units(initial_late_fee)}",
        f"Daily Late Fee: {format_minor_units(daily_late_fee)}",
        "",
        f"Current payment status: {status or 'unknown'}",
        "",
        "Thank you,",
        "",
        "This is an auto-generated email. Please do not reply to this email.",
    ]
    return "\n".join(lines)
