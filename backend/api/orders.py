from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from dependencies import get_order_orchestrator
from errors import OrderProcessingError, ValidationError
from schemas import ErrorResponse, OrderCreatedResponse, OrderRecord
from services.order_service import OrderOrchestrator

router = APIRouter(prefix="/orders", tags=["orders"])


async def _read_json(request: Request):
    body = await request.body()
    if not body:
        return None
    try:
        return await request.json()
    except ValueError:
        return None


@router.post(
    "",
    response_model=OrderCreatedResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_order(
    request: Request,
    orchestrator: OrderOrchestrator = Depends(get_order_orchestrator),
):
    payload = await _read_json(request)
    try:
        return await orchestrator.create_order(payload)
    except ValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc)},
        )
    except OrderProcessingError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Order processing failed", "details": str(exc)},
        )


@router.get("", response_model=List[OrderRecord])
async def list_orders(
    orchestrator: OrderOrchestrator = Depends(get_order_orchestrator),
) -> List[OrderRecord]:
    return await orchestrator.list_orders()
