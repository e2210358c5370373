from integrations import Integrations
from schemas import IntegrationsInfoResponse


def get_integrations_info(integrations: Integrations) -> IntegrationsInfoResponse:
    return IntegrationsInfoResponse(
        **integrations.describe(),
        enabled=integrations.enabled(),
    )
