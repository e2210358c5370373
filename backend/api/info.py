from fastapi import APIRouter, Depends

from dependencies import get_integrations
from integrations import Integrations
from schemas import IntegrationsInfoResponse
from services.info_service import get_integrations_info

router = APIRouter(tags=["info"])


@router.get("/integrations", response_model=IntegrationsInfoResponse)
async def read_integrations(
    integrations: Integrations = Depends(get_integrations),
) -> IntegrationsInfoResponse:
    return get_integrations_info(integrations)
