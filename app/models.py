from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

NOT_AVAILABLE = 'N/A'


def _text(value: Any) -> Optional[str]:
    """Metadata values come back as strings; empty ones count as absent."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _iso_timestamp(seconds: int) -> str:
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class StripeEventData(BaseModel):
    object: Dict[str, Any] = Field(default_factory=dict)


class StripeEvent(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: Optional[str] = None
    type: str
    created: Optional[int] = None
    data: StripeEventData = Field(default_factory=StripeEventData)


class BookingNotification(BaseModel):
    """Booking details sent to the operations inbox after checkout."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    booking_id: Optional[str] = None
    customer_name: str = ''
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    tour_option: Optional[str] = None
    preferred_language: str = 'English'
    payment_amount: Decimal = Decimal('0')
    payment_status: str = 'unknown'
    currency: str = 'USD'
    payment_intent_id: Optional[str] = None
    created_at: str

    @classmethod
    def from_checkout_session(cls, session: Dict[str, Any], event_created: Optional[int] = None) -> 'BookingNotification':
        metadata = session.get('metadata') or {}

        name_parts = [_text(metadata.get('firstName')), _text(metadata.get('lastName'))]
        customer_name = ' '.join(part for part in name_parts if part)

        customer_email = _text(session.get('customer_email'))
        if customer_email is None:
            customer_email = _text((session.get('customer_details') or {}).get('email'))

        amount_total = session.get('amount_total')
        payment_amount = Decimal(amount_total) / Decimal(100) if amount_total else Decimal('0')

        # payment_intent llega como id o como objeto expandido
        payment_intent = session.get('payment_intent')
        if isinstance(payment_intent, dict):
            payment_intent = payment_intent.get('id')

        created = session.get('created') or event_created
        if created is None:
            created = int(datetime.now(timezone.utc).timestamp())

        return cls(
            session_id=session['id'],
            booking_id=_text(metadata.get('bookingId')),
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=_text(metadata.get('phone')),
            tour_option=_text(metadata.get('tourOption')),
            preferred_language=_text(metadata.get('preferredLanguage')) or 'English',
            payment_amount=payment_amount,
            payment_status=_text(session.get('payment_status')) or 'unknown',
            currency=(_text(session.get('currency')) or 'usd').upper(),
            payment_intent_id=_text(payment_intent),
            created_at=_iso_timestamp(int(created)),
        )

    def display_fields(self) -> Dict[str, str]:
        """Every field as text, with N/A standing in for anything absent."""
        values = {
            'session_id': self.session_id,
            'booking_id': self.booking_id,
            'customer_name': self.customer_name,
            'customer_email': self.customer_email,
            'customer_phone': self.customer_phone,
            'tour_option': self.tour_option,
            'preferred_language': self.preferred_language,
            'payment_amount': f'{self.payment_amount:.2f}',
            'payment_status': self.payment_status,
            'currency': self.currency,
            'payment_intent_id': self.payment_intent_id,
            'created_at': self.created_at,
        }
        return {key: value or NOT_AVAILABLE for key, value in values.items()}


class EmailDeliveryResult(BaseModel):
    success: bool
    message: str
    provider_id: Optional[str] = None
