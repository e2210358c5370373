from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from errors import UpstreamError

PROVIDER = "docusign"


@dataclass
class EnvelopeResult:
    envelope_id: str
    status: Optional[str] = None


class EnvelopeClient:
    def __init__(
        self,
        base_path: str,
        account_id: str,
        access_token: str,
        *,
        signer_role: str = "Signer",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_path = base_path.rstrip("/")
        self.account_id = account_id
        self.access_token = access_token
        self.signer_role = signer_role
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _envelopes_url(self) -> str:
        return f"{self.base_path}/v2.1/accounts/{self.account_id}/envelopes"

    def _build_definition(
        self,
        template_id: str,
        signer_name: str,
        signer_email: str,
        subject: str,
    ) -> Dict[str, Any]:
        return {
            "emailSubject": subject,
            "templateId": template_id,
            "templateRoles": [
                {
                    "email": signer_email,
                    "name": signer_name,
                    "roleName": self.signer_role,
                }
            ],
            "status": "sent",
        }

    async def create_from_template(
        self,
        template_id: str,
        signer_name: str,
        signer_email: str,
        subject: str,
    ) -> EnvelopeResult:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        body = self._build_definition(template_id, signer_name, signer_email, subject)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self._envelopes_url(), json=body, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                PROVIDER,
                f"Envelope creation failed with status {exc.response.status_code}: {exc.response.text}",
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(PROVIDER, str(exc) or exc.__class__.__name__) from exc
        envelope_id = data.get("envelopeId") if isinstance(data, dict) else None
        if not envelope_id:
            raise UpstreamError(PROVIDER, "Response did not include an envelopeId")
        return EnvelopeResult(envelope_id=envelope_id, status=data.get("status"))
