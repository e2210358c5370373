import asyncio
import logging
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Set
from uuid import uuid4

from errors import PersistenceError, UpstreamError, ValidationError
from integrations import EnvelopeResult, Integrations
from repositories.order_repository import DEFAULT_LIST_LIMIT, OrderRepository
from schemas import OrderCreatedResponse, OrderInput, OrderRecord

logger = logging.getLogger("onboard-flow")

REQUIRED_FIELDS = ("name", "email", "product", "price")
MISSING_FIELDS_MESSAGE = "All fields are required."
PRICE_NOT_NUMBER_MESSAGE = "Price must be a number."
PRICE_NEGATIVE_MESSAGE = "Price must not be negative."
ENVELOPE_SENT_STATUS = "sent"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _parse_price(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError(PRICE_NOT_NUMBER_MESSAGE)
    if isinstance(value, (int, float)):
        price = float(value)
    elif isinstance(value, str):
        try:
            price = float(value.strip())
        except ValueError:
            raise ValidationError(PRICE_NOT_NUMBER_MESSAGE) from None
    else:
        raise ValidationError(PRICE_NOT_NUMBER_MESSAGE)
    if not math.isfinite(price):
        raise ValidationError(PRICE_NOT_NUMBER_MESSAGE)
    if price < 0:
        raise ValidationError(PRICE_NEGATIVE_MESSAGE)
    return price


def validate_order(payload: Any) -> OrderInput:
    if not isinstance(payload, dict):
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    for field in REQUIRED_FIELDS:
        if _is_blank(payload.get(field)):
            raise ValidationError(MISSING_FIELDS_MESSAGE)
    for field in ("name", "email", "product"):
        if not isinstance(payload[field], str):
            raise ValidationError(MISSING_FIELDS_MESSAGE)
    return OrderInput(
        name=payload["name"].strip(),
        email=payload["email"].strip(),
        product=payload["product"].strip(),
        price=_parse_price(payload["price"]),
    )


def to_minor_units(price: float) -> int:
    amount = Decimal(str(price)) * 100
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def new_order_id() -> str:
    return uuid4().hex


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderOrchestrator:
    """Runs one order through payment, envelope, work item, index and fan-out.

    Only the payment step is fatal. The record is written once, after every
    other step has resolved.
    """

    def __init__(self, integrations: Integrations, repository: OrderRepository) -> None:
        self.integrations = integrations
        self.repository = repository
        self._background_tasks: Set[asyncio.Task] = set()

    async def create_order(self, payload: Any) -> OrderCreatedResponse:
        order = validate_order(payload)
        order_id = new_order_id()

        try:
            payment = await self.integrations.payment.authorize(
                to_minor_units(order.price),
                self.integrations.currency,
                order.email,
                f"Order {order_id} - {order.product}",
                {"orderId": order_id, "product": order.product, "name": order.name},
            )
        except UpstreamError:
            logger.exception("Payment failed for order %s", order_id)
            raise
        logger.info("Payment created for order %s: %s (%s)", order_id, payment.id, payment.status)

        envelope = await self._create_envelope(order_id, order)
        envelope_id = envelope.envelope_id if envelope else None
        await self._create_work_item(order_id, order)

        record = OrderRecord(
            id=order_id,
            name=order.name,
            email=order.email,
            product=order.product,
            price=order.price,
            paymentId=payment.id,
            paymentStatus=payment.status,
            envelopeId=envelope_id,
            envelopeStatus=(envelope.status or ENVELOPE_SENT_STATUS) if envelope else None,
            createdAt=utc_timestamp(),
        )
        await self._index_order(record)
        self._dispatch_fanout(
            {
                "orderId": order_id,
                "name": order.name,
                "email": order.email,
                "product": order.product,
                "price": order.price,
            }
        )

        try:
            await asyncio.to_thread(self.repository.insert, record.model_dump())
        except Exception as exc:
            logger.exception("Failed to persist order %s", order_id)
            raise PersistenceError(str(exc)) from exc
        logger.info("Order %s stored", order_id)

        return OrderCreatedResponse(
            orderId=order_id,
            paymentId=payment.id,
            envelopeId=envelope_id,
        )

    async def _create_envelope(self, order_id: str, order: OrderInput) -> Optional[EnvelopeResult]:
        client = self.integrations.envelopes
        if client is None:
            logger.warning("DocuSign not configured; skipping envelope creation.")
            return None
        try:
            result = await client.create_from_template(
                self.integrations.envelope_template_id,
                order.name,
                order.email,
                f"Please sign your contract for {order.product}",
            )
        except Exception as exc:
            logger.warning("Envelope creation failed for order %s: %s", order_id, exc)
            return None
        logger.info("Envelope created for order %s: %s", order_id, result.envelope_id)
        return result

    async def _create_work_item(self, order_id: str, order: OrderInput) -> None:
        client = self.integrations.work_items
        if client is None:
            logger.info("Work-item board not configured; skipping item creation.")
            return
        try:
            item_id = await client.create_item(
                self.integrations.work_item_board_id,
                f"{order.name} - {order.product}",
            )
        except Exception as exc:
            logger.warning("Work item creation failed for order %s: %s", order_id, exc)
            return
        logger.info("Work item %s created for order %s", item_id, order_id)

    async def _index_order(self, record: OrderRecord) -> None:
        client = self.integrations.search_index
        if client is None:
            logger.info("Search index not configured; skipping indexing.")
            return
        document = record.model_dump(
            include={"name", "email", "product", "price", "paymentId", "envelopeId", "createdAt"}
        )
        try:
            await client.upsert(record.id, document)
        except Exception as exc:
            logger.warning("Indexing failed for order %s: %s", record.id, exc)
            return
        logger.info("Indexed order %s", record.id)

    def _dispatch_fanout(self, payload: Dict[str, Any]) -> None:
        if self.integrations.fanout is None:
            return
        task = asyncio.create_task(self._notify(payload))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _notify(self, payload: Dict[str, Any]) -> None:
        try:
            await self.integrations.fanout.notify(payload)
        except Exception as exc:
            logger.warning("Fan-out call failed for order %s: %s", payload.get("orderId"), exc)
            return
        logger.info("Fan-out called for order %s", payload.get("orderId"))

    async def list_orders(self, limit: int = DEFAULT_LIST_LIMIT) -> List[OrderRecord]:
        rows = await asyncio.to_thread(self.repository.list_recent, limit)
        return [OrderRecord(**row) for row in rows]

    async def aclose(self) -> None:
        if not self._background_tasks:
            return
        await asyncio.gather(*list(self._background_tasks), return_exceptions=True)
