class WebhookError(Exception):
    """Base para los errores del webhook de Stripe."""

    status_code = 500
    message = "Webhook processing failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class WebhookConfigurationError(WebhookError):
    status_code = 500
    message = "Stripe webhook or Mailgun is not configured"


class WebhookAuthenticationError(WebhookError):
    status_code = 400
    message = "Invalid signature"


class DownstreamNotificationError(Exception):
    """Mailgun rejected the message or could not be reached."""
