from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from errors import PersistenceError, UpstreamError, ValidationError
from fakes import (
    FakeEnvelopeClient,
    FakeFanoutClient,
    FakePaymentClient,
    FakeSearchIndexClient,
    FakeWorkItemClient,
    stored_order,
    upstream,
)
from integrations import Integrations, SearchIndexClient
from services.order_service import OrderOrchestrator


@pytest.mark.asyncio
async def test_payment_only_order_is_persisted(repository, integrations, payment, order_payload) -> None:
    orchestrator = OrderOrchestrator(integrations, repository)

    response = await orchestrator.create_order(order_payload)

    assert response.message == "Order processed"
    assert response.paymentId == "pi_1"
    assert response.envelopeId is None
    stored = stored_order(repository, response.orderId)
    assert stored["price"] == 49.99
    assert stored["paymentStatus"] == "succeeded"
    assert stored["envelopeId"] is None
    assert stored["envelopeStatus"] is None
    assert stored["createdAt"].endswith("Z")

    amount, currency, email, description, metadata = payment.calls[0]
    assert amount == 4999
    assert currency == "usd"
    assert email == "ada@x.com"
    assert description == f"Order {response.orderId} - Plan A"
    assert metadata == {"orderId": response.orderId, "product": "Plan A", "name": "Ada"}


@pytest.mark.asyncio
async def test_invalid_input_makes_no_calls(repository, integrations, payment, order_payload) -> None:
    orchestrator = OrderOrchestrator(integrations, repository)

    with pytest.raises(ValidationError, match="Price must be a number."):
        await orchestrator.create_order({**order_payload, "price": "abc"})

    assert payment.calls == []
    assert repository.list_recent() == []


@pytest.mark.asyncio
async def test_payment_failure_is_fatal_and_nothing_is_stored(repository, order_payload) -> None:
    envelopes = FakeEnvelopeClient()
    fanout = FakeFanoutClient()
    integrations = Integrations(
        payment=FakePaymentClient(error=upstream("stripe")),
        envelopes=envelopes,
        fanout=fanout,
    )
    orchestrator = OrderOrchestrator(integrations, repository)

    with pytest.raises(UpstreamError):
        await orchestrator.create_order(order_payload)
    await orchestrator.aclose()

    assert envelopes.calls == []
    assert fanout.calls == []
    assert repository.list_recent() == []


@pytest.mark.asyncio
async def test_all_integrations_receive_the_order(repository, order_payload) -> None:
    envelopes = FakeEnvelopeClient()
    work_items = FakeWorkItemClient()
    search_index = FakeSearchIndexClient()
    fanout = FakeFanoutClient()
    integrations = Integrations(
        payment=FakePaymentClient(),
        envelopes=envelopes,
        envelope_template_id="tpl_1",
        work_items=work_items,
        work_item_board_id="42",
        search_index=search_index,
        fanout=fanout,
    )
    orchestrator = OrderOrchestrator(integrations, repository)

    response = await orchestrator.create_order(order_payload)
    await orchestrator.aclose()

    assert response.envelopeId == "env_1"
    assert envelopes.calls == [
        ("tpl_1", "Ada", "ada@x.com", "Please sign your contract for Plan A")
    ]
    assert work_items.calls == [("42", "Ada - Plan A")]

    object_id, document = search_index.calls[0]
    stored = stored_order(repository, response.orderId)
    assert object_id == response.orderId
    assert document == {
        "name": "Ada",
        "email": "ada@x.com",
        "product": "Plan A",
        "price": 49.99,
        "paymentId": "pi_1",
        "envelopeId": "env_1",
        "createdAt": stored["createdAt"],
    }
    assert fanout.calls == [
        {
            "orderId": response.orderId,
            "name": "Ada",
            "email": "ada@x.com",
            "product": "Plan A",
            "price": 49.99,
        }
    ]
    assert stored["envelopeId"] == "env_1"
    assert stored["envelopeStatus"] == "sent"


@pytest.mark.asyncio
async def test_optional_step_failures_do_not_change_the_outcome(repository, order_payload) -> None:
    search_index = FakeSearchIndexClient(error=upstream("algolia"))
    integrations = Integrations(
        payment=FakePaymentClient(),
        envelopes=FakeEnvelopeClient(error=upstream("docusign")),
        work_items=FakeWorkItemClient(error=upstream("monday")),
        search_index=search_index,
        fanout=FakeFanoutClient(error=upstream("zapier")),
    )
    orchestrator = OrderOrchestrator(integrations, repository)

    response = await orchestrator.create_order(order_payload)
    await orchestrator.aclose()

    assert response.paymentId == "pi_1"
    assert response.envelopeId is None
    assert search_index.calls[0][1]["envelopeId"] is None
    stored = stored_order(repository, response.orderId)
    assert stored["envelopeId"] is None
    assert stored["envelopeStatus"] is None


@pytest.mark.asyncio
async def test_fanout_is_not_awaited_by_the_response(repository, order_payload) -> None:
    release = asyncio.Event()

    class SlowFanout(FakeFanoutClient):
        async def notify(self, payload):
            await release.wait()
            await super().notify(payload)

    fanout = SlowFanout()
    orchestrator = OrderOrchestrator(
        Integrations(payment=FakePaymentClient(), fanout=fanout), repository
    )

    response = await orchestrator.create_order(order_payload)

    assert stored_order(repository, response.orderId) is not None
    assert fanout.calls == []

    release.set()
    await orchestrator.aclose()
    assert len(fanout.calls) == 1


@pytest.mark.asyncio
async def test_concurrent_orders_get_distinct_ids(repository, integrations, order_payload) -> None:
    orchestrator = OrderOrchestrator(integrations, repository)

    first, second = await asyncio.gather(
        orchestrator.create_order(order_payload),
        orchestrator.create_order({**order_payload, "name": "Grace"}),
    )

    assert first.orderId != second.orderId
    assert {row["id"] for row in repository.list_recent()} == {first.orderId, second.orderId}


@pytest.mark.asyncio
async def test_store_failure_is_reported_as_processing_error(integrations, order_payload) -> None:
    repo = MagicMock()
    repo.insert.side_effect = RuntimeError("disk full")
    orchestrator = OrderOrchestrator(integrations, repo)

    with pytest.raises(PersistenceError, match="disk full"):
        await orchestrator.create_order(order_payload)


@pytest.mark.asyncio
async def test_list_orders_returns_records(repository, integrations, order_payload) -> None:
    orchestrator = OrderOrchestrator(integrations, repository)
    created = await orchestrator.create_order(order_payload)

    orders = await orchestrator.list_orders()

    assert [order.id for order in orders] == [created.orderId]
    assert orders[0].paymentId == "pi_1"


@pytest.mark.asyncio
async def test_unexpected_optional_step_errors_are_swallowed(repository, order_payload) -> None:
    integrations = Integrations(
        payment=FakePaymentClient(),
        envelopes=FakeEnvelopeClient(error=RuntimeError("template renderer crashed")),
        work_items=FakeWorkItemClient(error=KeyError("id")),
        search_index=SearchIndexClient("bad app\x00id", "key", "idx"),
    )
    orchestrator = OrderOrchestrator(integrations, repository)

    response = await orchestrator.create_order(order_payload)

    assert response.paymentId == "pi_1"
    assert response.envelopeId is None
    stored = stored_order(repository, response.orderId)
    assert stored["paymentStatus"] == "succeeded"
    assert stored["envelopeId"] is None


@pytest.mark.asyncio
async def test_envelope_status_from_provider_is_stored(repository, order_payload) -> None:
    integrations = Integrations(
        payment=FakePaymentClient(),
        envelopes=FakeEnvelopeClient(envelope_id="env_2", status="created"),
    )
    orchestrator = OrderOrchestrator(integrations, repository)

    response = await orchestrator.create_order(order_payload)

    stored = stored_order(repository, response.orderId)
    assert stored["envelopeId"] == "env_2"
    assert stored["envelopeStatus"] == "created"


@pytest.mark.asyncio
async def test_missing_envelope_status_defaults_to_sent(repository, order_payload) -> None:
    integrations = Integrations(
        payment=FakePaymentClient(),
        envelopes=FakeEnvelopeClient(status=None),
    )
    orchestrator = OrderOrchestrator(integrations, repository)

    response = await orchestrator.create_order(order_payload)

    assert stored_order(repository, response.orderId)["envelopeStatus"] == "sent"
