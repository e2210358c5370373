from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import stripe

from errors import SignatureVerificationError, UpstreamError

PROVIDER = "stripe"


@dataclass
class PaymentResult:
    id: str
    status: str


class PaymentClient:
    def __init__(
        self,
        secret_key: str,
        *,
        webhook_secret: str = "",
        timeout_seconds: float = 10.0,
        stripe_client: Optional[stripe.StripeClient] = None,
    ) -> None:
        self.webhook_secret = webhook_secret
        self.timeout_seconds = timeout_seconds
        self._client = stripe_client
        if self._client is None and secret_key:
            self._client = stripe.StripeClient(
                secret_key,
                max_network_retries=0,
                http_client=stripe.RequestsClient(timeout=timeout_seconds),
            )

    @property
    def configured(self) -> bool:
        return self._client is not None

    def _create_intent(self, params: Dict[str, Any]) -> PaymentResult:
        intent = self._client.v1.payment_intents.create(params=params)
        return PaymentResult(id=intent.id, status=intent.status)

    async def authorize(
        self,
        amount_minor_units: int,
        currency: str,
        receipt_email: str,
        description: str,
        metadata: Dict[str, str],
    ) -> PaymentResult:
        if isinstance(amount_minor_units, bool) or not isinstance(amount_minor_units, int):
            raise UpstreamError(PROVIDER, "Amount must be an integer number of minor units")
        if amount_minor_units < 0:
            raise UpstreamError(PROVIDER, "Amount must not be negative")
        if not self.configured:
            raise UpstreamError(PROVIDER, "Payment provider is not configured")
        params = {
            "amount": amount_minor_units,
            "currency": currency,
            "receipt_email": receipt_email,
            "description": description,
            "metadata": metadata,
        }
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._create_intent, params),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise UpstreamError(PROVIDER, "Payment request timed out") from exc
        except stripe.StripeError as exc:
            raise UpstreamError(PROVIDER, exc.user_message or str(exc)) from exc
        except Exception as exc:  # pragma: no cover - network/SDK failures
            raise UpstreamError(PROVIDER, str(exc)) from exc

    def construct_event(self, payload: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SignatureVerificationError(str(exc)) from exc
        if self.webhook_secret:
            if not signature_header:
                raise SignatureVerificationError(
                    "No stripe-signature header value was provided."
                )
            try:
                stripe.WebhookSignature.verify_header(
                    text,
                    signature_header,
                    self.webhook_secret,
                    stripe.Webhook.DEFAULT_TOLERANCE,
                )
            except stripe.SignatureVerificationError as exc:
                raise SignatureVerificationError(str(exc)) from exc
        try:
            event = json.loads(text)
        except ValueError as exc:
            raise SignatureVerificationError(str(exc)) from exc
        if not isinstance(event, dict):
            raise SignatureVerificationError("Event body must be a JSON object")
        return event
