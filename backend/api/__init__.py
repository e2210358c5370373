from .info import router as info_router
from .orders import router as orders_router
from .webhooks import router as webhooks_router

__all__ = [
    "info_router",
    "orders_router",
    "webhooks_router",
]
