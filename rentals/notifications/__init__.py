"""
Email notifications sent to tenants about their rent payments.
"""

from notifications.email_client import EmailClient, get_email_client
from notifications.notifier import Notifier

__all__ = ["EmailClient", "Notifier", "get_email_client"]
