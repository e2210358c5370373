from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from errors import UpstreamError

PROVIDER = "monday"

CREATE_ITEM_MUTATION = (
    "mutation ($boardId: ID!, $itemName: String!) "
    "{ create_item (board_id: $boardId, item_name: $itemName) { id } }"
)


def _extract_item_id(data: Dict[str, Any]) -> Optional[str]:
    payload = data.get("data")
    if not isinstance(payload, dict):
        return None
    item = payload.get("create_item")
    if not isinstance(item, dict) or item.get("id") is None:
        return None
    return str(item["id"])


class WorkItemClient:
    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = "https://api.monday.com/v2",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def create_item(self, board_id: str, title: str) -> str:
        headers = {"Authorization": self.api_key}
        body = {
            "query": CREATE_ITEM_MUTATION,
            "variables": {"boardId": str(board_id), "itemName": title},
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self.api_url, json=body, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                PROVIDER, f"create_item failed with status {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(PROVIDER, str(exc) or exc.__class__.__name__) from exc
        if not isinstance(data, dict):
            raise UpstreamError(PROVIDER, "Unexpected response body")
        errors = data.get("errors") or data.get("error_message")
        if errors:
            raise UpstreamError(PROVIDER, f"create_item rejected: {errors}")
        item_id = _extract_item_id(data)
        if item_id is None:
            raise UpstreamError(PROVIDER, "Response did not include an item id")
        return item_id
