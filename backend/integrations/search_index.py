from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from errors import UpstreamError

PROVIDER = "algolia"


class SearchIndexClient:
    def __init__(
        self,
        app_id: str,
        admin_key: str,
        index_name: str,
        *,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.app_id = app_id
        self.admin_key = admin_key
        self.index_name = index_name
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _object_url(self, object_id: str) -> str:
        return (
            f"https://{self.app_id}.algolia.net/1/indexes/"
            f"{quote(self.index_name, safe='')}/{quote(object_id, safe='')}"
        )

    async def upsert(self, object_id: str, document: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "X-Algolia-Application-Id": self.app_id,
            "X-Algolia-API-Key": self.admin_key,
        }
        body = {**document, "objectID": object_id}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.put(self._object_url(object_id), json=body, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                PROVIDER, f"Index write failed with status {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(PROVIDER, str(exc) or exc.__class__.__name__) from exc
