"""
Client for the site's email-sending function.
"""

from typing import Optional
import httpx

from core.config import settings
from payments.exceptions import NotificationError
from monitoring.logger import get_logger

logger = get_logger(__name__)


class EmailClient:
    """Posts ``{to, subject, text}`` to the email function."""

    def __init__(
        self,
        send_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the email client.

        Args:
            send_url: Email function URL (defaults to SITE_URL + EMAIL_SEND_PATH)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.send_url = send_url or settings.email_send_url
        self.timeout = timeout or settings.email_timeout
        self.transport = transport

    async def send_email(self, to: str, subject: str, text: str) -> int:
        """
        Send a plaintext email.

        Args:
            to: Recipient address
            subject: Email subject
            text: Plaintext body

        Returns:
            HTTP status code of the accepted request

        Raises:
            NotificationError: On transport errors, an invalid URL or a non-2xx response
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.send_url,
                    json={"to": to, "subject": subject, "text": text},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotificationError(f"Email request failed: {e}") from e

        if not response.is_success:
            raise NotificationError(
                f"Email function returned {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        logger.info(
            "Email sent successfully",
            extra={"to": to, "status_code": response.status_code},
        )
        return response.status_code


_email_client: Optional[EmailClient] = None


def get_email_client() -> EmailClient:
    """Get or create the email client."""
    global _email_client
    if _email_client is None:
        _email_client = EmailClient()
    return _email_client
