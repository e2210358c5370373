import logging
from typing import Optional

from fastapi import FastAPI

from api import info_router, orders_router, webhooks_router
from config import Settings, settings
from integrations import Integrations
from repositories.order_repository import OrderRepository
from services.order_service import OrderOrchestrator
from services.webhook_service import WebhookService

logger = logging.getLogger("onboard-flow")


def create_app(
    app_settings: Settings,
    integrations: Optional[Integrations] = None,
    repository: Optional[OrderRepository] = None,
) -> FastAPI:
    integrations = integrations or Integrations.from_settings(app_settings)
    repository = repository or OrderRepository(app_settings.sqlite_file)
    orchestrator = OrderOrchestrator(integrations, repository)

    app = FastAPI(title="Onboard Flow API")
    app.state.settings = app_settings
    app.state.integrations = integrations
    app.state.order_repository = repository
    app.state.order_orchestrator = orchestrator
    app.state.webhook_service = WebhookService(integrations.payment)

    app.include_router(orders_router)
    app.include_router(webhooks_router)
    app.include_router(info_router)

    @app.on_event("startup")
    async def _on_startup() -> None:
        repository.initialize()
        logger.info("Order store ready at %s", repository.path)
        if not integrations.payment.configured:
            logger.warning(
                "STRIPE_SECRET_KEY is not set; every order will fail at the payment step."
            )
        logger.info("Enabled integrations: %s", ", ".join(integrations.enabled()) or "none")

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        await orchestrator.aclose()

    return app


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
