from fastapi import Depends

from app.config import Settings, get_settings
from app.services.notifications import EmailNotifier, build_email_notifier
from app.webhook_handler import WebhookHandler


async def get_email_notifier(settings: Settings = Depends(get_settings)) -> EmailNotifier:
    return build_email_notifier(settings)


async def get_webhook_handler(
    settings: Settings = Depends(get_settings),
    notifier: EmailNotifier = Depends(get_email_notifier),
) -> WebhookHandler:
    return WebhookHandler(settings, notifier)
