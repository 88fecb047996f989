import logging

import stripe

from app.errors import WebhookAuthenticationError

logger = logging.getLogger(__name__)


class StripeSignatureVerifier:
    """Checks the Stripe-Signature header against the raw request body."""

    def __init__(self, webhook_secret: str, tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE):
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

    def verify(self, payload: bytes, sig_header: str) -> str:
        """Return the verified payload as text, or raise WebhookAuthenticationError.

        The body must be the exact bytes Stripe signed; parsing it first
        breaks the signature.
        """
        try:
            body = payload.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.error(f"Webhook Error: payload is not valid UTF-8 - {e}")
            raise WebhookAuthenticationError() from e

        try:
            stripe.WebhookSignature.verify_header(body, sig_header, self.webhook_secret, self.tolerance)
        except stripe.SignatureVerificationError as e:
            logger.error(f"Webhook Error: Invalid signature - {e}")
            raise WebhookAuthenticationError() from e

        return body
