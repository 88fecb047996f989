import logging
from typing import Optional

from fastapi.responses import JSONResponse

from app.config import Settings
from app.errors import WebhookAuthenticationError, WebhookConfigurationError, WebhookError
from app.models import BookingNotification, StripeEvent
from app.services.notifications import EmailNotifier
from app.services.stripe_verifier import StripeSignatureVerifier

logger = logging.getLogger(__name__)


def _error(exc: WebhookError) -> JSONResponse:
    return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)


class WebhookHandler:
    """Verifies Stripe webhooks and dispatches them by event type."""

    def __init__(self, settings: Settings, notifier: EmailNotifier, verifier: Optional[StripeSignatureVerifier] = None):
        self.settings = settings
        self.notifier = notifier
        self.verifier = verifier
        if self.verifier is None and settings.stripe_webhook_secret:
            self.verifier = StripeSignatureVerifier(settings.stripe_webhook_secret, settings.stripe_webhook_tolerance)

    def _check_configured(self) -> None:
        if not self.settings.stripe_configured or self.verifier is None or not self.notifier.configured:
            logger.error("Stripe webhook or Mailgun is not configured!")
            raise WebhookConfigurationError()

    def _verify(self, payload: bytes, sig_header: Optional[str]) -> str:
        if not sig_header:
            logger.warning("Webhook Error: request without Stripe-Signature header")
            raise WebhookAuthenticationError("Missing stripe-signature header")
        return self.verifier.verify(payload, sig_header)

    async def handle(self, payload: bytes, sig_header: Optional[str]) -> JSONResponse:
        try:
            self._check_configured()
            body = self._verify(payload, sig_header)
        except WebhookError as e:
            return _error(e)

        try:
            event = StripeEvent.model_validate_json(body)
            logger.info(f"Received Stripe event: {event.type} ({event.id})")
            await self.dispatch(event)
        except Exception as e:
            logger.error(f"Error processing webhook: {e}", exc_info=True)
            return _error(WebhookError())

        return JSONResponse(content={"received": True}, status_code=200)

    async def dispatch(self, event: StripeEvent) -> None:
        event_object = event.data.object

        # --- Enrutamiento de eventos ---
        if event.type == 'checkout.session.completed':
            await self._handle_checkout_completed(event)
        elif event.type == 'checkout.session.expired':
            logger.info(f"Checkout session expired: {event_object.get('id')}")
        elif event.type == 'payment_intent.payment_failed':
            logger.warning(f"Payment failed: {event_object.get('id')}")
        else:
            logger.info(f"Unhandled event type: {event.type}")

    async def _handle_checkout_completed(self, event: StripeEvent) -> None:
        session = event.data.object
        logger.info(f"Payment succeeded for session: {session.get('id')}")

        booking = BookingNotification.from_checkout_session(session, event.created)
        logger.info(f"Booking completed: {booking.model_dump_json()}")

        if await self.notifier.notify(booking):
            logger.info("Email notification sent successfully")
        else:
            logger.warning("Email notification failed or not configured")
