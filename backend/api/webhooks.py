import logging

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import PlainTextResponse

from dependencies import get_webhook_service
from errors import SignatureVerificationError
from schemas import WebhookAck
from services.webhook_service import WebhookService

logger = logging.getLogger("onboard-flow")

router = APIRouter(prefix="/webhook", tags=["webhooks"])


@router.post("/stripe", response_model=WebhookAck)
async def receive_stripe_event(
    request: Request,
    stripe_signature: str | None = Header(default=None),
    service: WebhookService = Depends(get_webhook_service),
):
    body = await request.body()
    try:
        return service.handle_payment_event(body, stripe_signature)
    except SignatureVerificationError as exc:
        logger.warning("Stripe webhook signature verification failed: %s", exc)
        return PlainTextResponse(
            f"Webhook Error: {exc}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


@router.post("/docusign", response_class=PlainTextResponse)
async def receive_docusign_event(
    request: Request,
    service: WebhookService = Depends(get_webhook_service),
) -> PlainTextResponse:
    service.handle_envelope_event(await request.body())
    return PlainTextResponse("OK")
