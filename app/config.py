import os
import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# variables desde .env
load_dotenv()

# logging
logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

DEFAULT_MAILGUN_DOMAIN = 'sixhourlayover.com'


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


class Settings(BaseModel):
    """Process-wide configuration, read once from the environment."""

    model_config = ConfigDict(frozen=True)

    # --- Stripe ---
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_webhook_tolerance: int = 300

    # --- Mailgun ---
    mailgun_api_key: Optional[str] = None
    mailgun_domain: str = DEFAULT_MAILGUN_DOMAIN
    mailgun_base_url: str = 'https://api.mailgun.net'
    mailgun_timeout: float = 10.0

    # --- Booking notification ---
    email_from: Optional[str] = None
    email_to: List[str] = []
    display_timezone: str = 'America/Los_Angeles'

    @property
    def sender(self) -> str:
        return self.email_from or f'Six Hour Layover <noreply@{self.mailgun_domain}>'

    @property
    def recipients(self) -> List[str]:
        return self.email_to or [f'booking@{self.mailgun_domain}']

    @property
    def stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key and self.stripe_webhook_secret)

    @property
    def mailgun_configured(self) -> bool:
        return bool(self.mailgun_api_key)

    @classmethod
    def from_env(cls) -> 'Settings':
        recipients = [r.strip() for r in (_env('BOOKING_EMAIL_TO') or '').split(',') if r.strip()]
        return cls(
            stripe_secret_key=_env('STRIPE_SECRET_KEY'),
            stripe_webhook_secret=_env('STRIPE_WEBHOOK_SECRET'),
            stripe_webhook_tolerance=int(_env('STRIPE_WEBHOOK_TOLERANCE_SECONDS') or 300),
            mailgun_api_key=_env('MAILGUN_API_KEY'),
            mailgun_domain=_env('MAILGUN_DOMAIN') or DEFAULT_MAILGUN_DOMAIN,
            mailgun_base_url=_env('MAILGUN_BASE_URL') or 'https://api.mailgun.net',
            mailgun_timeout=float(_env('MAILGUN_TIMEOUT_SECONDS') or 10.0),
            email_from=_env('BOOKING_EMAIL_FROM'),
            email_to=recipients,
            display_timezone=_env('BOOKING_DISPLAY_TIMEZONE') or 'America/Los_Angeles',
        )


@lru_cache
def get_settings() -> Settings:
    settings = Settings.from_env()

    # --- Configuración de Stripe ---
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY no configurada. El webhook responderá 500.")
    if not settings.stripe_webhook_secret:
        logger.warning("STRIPE_WEBHOOK_SECRET no configurada. El webhook responderá 500.")

    # --- Configuración de Mailgun ---
    if settings.mailgun_configured:
        logger.info(f"Mailgun configurado para el dominio {settings.mailgun_domain}.")
    else:
        logger.warning("MAILGUN_API_KEY no encontrada. Las notificaciones por email no funcionarán.")

    return settings
