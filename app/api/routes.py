from fastapi import APIRouter, Depends, Request

from app.api.deps import get_webhook_handler
from app.webhook_handler import WebhookHandler

router = APIRouter()


# --- Endpoint Principal del Webhook ---
@router.post("/stripe-webhook")
async def stripe_webhook(request: Request, handler: WebhookHandler = Depends(get_webhook_handler)):
    # cuerpo sin parsear: la firma se calcula sobre los bytes exactos
    payload = await request.body()
    sig_header = request.headers.get('Stripe-Signature')
    return await handler.handle(payload, sig_header)
