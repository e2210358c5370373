import json
import logging
from typing import Any, Dict, Optional

from integrations import PaymentClient

logger = logging.getLogger("onboard-flow")

PAYMENT_SUCCEEDED_EVENT = "payment_intent.succeeded"


def _event_object(event: Dict[str, Any]) -> Dict[str, Any]:
    data = event.get("data")
    if not isinstance(data, dict):
        return {}
    obj = data.get("object")
    return obj if isinstance(obj, dict) else {}


class WebhookService:
    def __init__(self, payment: PaymentClient) -> None:
        self.payment = payment

    def handle_payment_event(self, body: bytes, signature: Optional[str]) -> Dict[str, Any]:
        event = self.payment.construct_event(body, signature)
        event_type = event.get("type")
        logger.info("Stripe webhook received: %s", event_type)
        if event_type == PAYMENT_SUCCEEDED_EVENT:
            # Log only; stored records are never updated after insert.
            logger.info("Payment succeeded for: %s", _event_object(event).get("id"))
        return {"received": True}

    def handle_envelope_event(self, body: bytes) -> None:
        try:
            payload = json.loads(body.decode("utf-8")) if body else None
        except (UnicodeDecodeError, ValueError):
            logger.info(
                "DocuSign webhook received (non-JSON body): %s",
                body.decode("utf-8", errors="replace"),
            )
            return
        logger.info("DocuSign webhook received: %s", json.dumps(payload))
