from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from errors import UpstreamError

PROVIDER = "zapier"


class FanoutClient:
    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def notify(self, payload: Dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                PROVIDER, f"Webhook returned status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(PROVIDER, str(exc) or exc.__class__.__name__) from exc
