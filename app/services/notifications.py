"""Booking notification email via Mailgun.

The Mailgun call is awaited, so ``notify`` reports whether Mailgun actually
accepted the message. Failures are logged and turned into ``False``; they
never reach the webhook response.
"""

import logging
from datetime import datetime
from html import escape
from typing import List, Optional
from zoneinfo import ZoneInfo

import httpx

from app.config import Settings
from app.errors import DownstreamNotificationError
from app.models import BookingNotification, EmailDeliveryResult

logger = logging.getLogger(__name__)

BOOKING_EMAIL_TEMPLATE = """
<h2>🎉 New Booking Confirmed</h2>

<h3>Customer Information</h3>
<ul>
  <li><strong>Name:</strong> {customer_name}</li>
  <li><strong>Email:</strong> {customer_email}</li>
  <li><strong>Phone:</strong> {customer_phone}</li>
</ul>

<h3>Booking Details</h3>
<ul>
  <li><strong>Tour Option:</strong> {tour_option}</li>
  <li><strong>Preferred Language:</strong> {preferred_language}</li>
  <li><strong>Total Amount:</strong> ${payment_amount} {currency}</li>
  <li><strong>Payment Status:</strong> {payment_status}</li>
</ul>

<h3>Technical Details</h3>
<ul>
  <li><strong>Booking ID:</strong> {booking_id}</li>
  <li><strong>Stripe Session ID:</strong> {session_id}</li>
  <li><strong>Payment Intent ID:</strong> {payment_intent_id}</li>
  <li><strong>Payment Created:</strong> {created_at}</li>
  <li><strong>Booking Time:</strong> {booking_time}</li>
</ul>

<p><em>This booking was automatically processed through the Six Hour Layover booking system.</em></p>
"""


def format_booking_time(moment: datetime) -> str:
    # p.ej. "October 19, 2026 at 03:04:05 PM"
    return f"{moment:%B} {moment.day}, {moment.year} at {moment:%I:%M:%S %p}"


def render_booking_email(info: BookingNotification, booking_time: str) -> str:
    fields = {key: escape(value) for key, value in info.display_fields().items()}
    return BOOKING_EMAIL_TEMPLATE.format(booking_time=escape(booking_time), **fields)


def booking_subject(info: BookingNotification) -> str:
    return f"🎉 New Booking Confirmed - {info.display_fields()['customer_name']}"


class MailgunClient:
    def __init__(
        self,
        api_key: str,
        domain: str,
        base_url: str = 'https://api.mailgun.net',
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.domain = domain
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/v3/{self.domain}/messages"

    async def send(self, sender: str, to: List[str], subject: str, html: str) -> EmailDeliveryResult:
        """Submit one message; raise DownstreamNotificationError unless Mailgun accepts it."""
        data = {'from': sender, 'to': to, 'subject': subject, 'html': html}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.messages_url, auth=('api', self.api_key), data=data)
        except httpx.HTTPError as e:
            raise DownstreamNotificationError(f"Mailgun request failed: {type(e).__name__}: {e}") from e

        if response.is_error:
            raise DownstreamNotificationError(
                f"Mailgun responded {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError:
            body = {}

        return EmailDeliveryResult(
            success=True,
            message=body.get('message', 'Queued'),
            provider_id=body.get('id'),
        )


class EmailNotifier:
    def __init__(self, client: Optional[MailgunClient], settings: Settings):
        self.client = client
        self.settings = settings

    @property
    def configured(self) -> bool:
        return self.client is not None

    def _now(self) -> datetime:
        return datetime.now(ZoneInfo(self.settings.display_timezone))

    async def notify(self, info: BookingNotification) -> bool:
        if self.client is None:
            logger.warning("Mailgun not configured. Email not sent.")
            return False

        try:
            result = await self.client.send(
                sender=self.settings.sender,
                to=self.settings.recipients,
                subject=booking_subject(info),
                html=render_booking_email(info, format_booking_time(self._now())),
            )
        except DownstreamNotificationError as e:
            logger.error(f"Email sending failed for session {info.session_id}: {e}")
            return False
        except Exception as e:
            logger.error(f"Failed to send notification email for session {info.session_id}: {e}", exc_info=True)
            return False

        logger.info(f"Email sent successfully for session {info.session_id}: {result.message} ({result.provider_id})")
        return result.success


def build_email_notifier(settings: Settings) -> EmailNotifier:
    client = None
    if settings.mailgun_configured:
        client = MailgunClient(
            api_key=settings.mailgun_api_key,
            domain=settings.mailgun_domain,
            base_url=settings.mailgun_base_url,
            timeout=settings.mailgun_timeout,
        )
    return EmailNotifier(client, settings)
