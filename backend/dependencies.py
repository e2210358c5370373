from fastapi import Request

from integrations import Integrations
from services.order_service import OrderOrchestrator
from services.webhook_service import WebhookService


def get_order_orchestrator(request: Request) -> OrderOrchestrator:
    return request.app.state.order_orchestrator


def get_webhook_service(request: Request) -> WebhookService:
    return request.app.state.webhook_service


def get_integrations(request: Request) -> Integrations:
    return request.app.state.integrations
