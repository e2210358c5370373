from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from config import Settings

from .envelopes import EnvelopeClient, EnvelopeResult
from .fanout import FanoutClient
from .payments import PaymentClient, PaymentResult
from .search_index import SearchIndexClient
from .work_items import WorkItemClient

__all__ = [
    "EnvelopeClient",
    "EnvelopeResult",
    "FanoutClient",
    "Integrations",
    "PaymentClient",
    "PaymentResult",
    "SearchIndexClient",
    "WorkItemClient",
]


@dataclass(frozen=True)
class Integrations:
    """Outbound clients for one process. A ``None`` client is a skipped step."""

    payment: PaymentClient
    currency: str = "usd"
    envelopes: Optional[EnvelopeClient] = None
    envelope_template_id: str = ""
    work_items: Optional[WorkItemClient] = None
    work_item_board_id: str = ""
    search_index: Optional[SearchIndexClient] = None
    fanout: Optional[FanoutClient] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Integrations":
        timeout = settings.http_timeout_seconds
        payment = PaymentClient(
            settings.stripe_secret_key,
            webhook_secret=settings.stripe_webhook_secret,
            timeout_seconds=timeout,
        )
        envelopes = None
        if settings.envelopes_enabled:
            envelopes = EnvelopeClient(
                settings.docusign_base_path,
                settings.docusign_account_id,
                settings.docusign_access_token,
                signer_role=settings.docusign_signer_role,
                timeout_seconds=timeout,
            )
        work_items = None
        if settings.work_items_enabled:
            work_items = WorkItemClient(
                settings.monday_api_key,
                api_url=settings.monday_api_url,
                timeout_seconds=timeout,
            )
        search_index = None
        if settings.search_index_enabled:
            search_index = SearchIndexClient(
                settings.algolia_app_id,
                settings.algolia_admin_key,
                settings.algolia_index_name,
                timeout_seconds=timeout,
            )
        fanout = None
        if settings.fanout_enabled:
            fanout = FanoutClient(settings.zapier_webhook_url, timeout_seconds=timeout)
        return cls(
            payment=payment,
            currency=settings.stripe_currency,
            envelopes=envelopes,
            envelope_template_id=settings.docusign_template_id,
            work_items=work_items,
            work_item_board_id=settings.monday_board_id,
            search_index=search_index,
            fanout=fanout,
        )

    def describe(self) -> Dict[str, bool]:
        return {
            "payment": self.payment.configured,
            "envelopes": self.envelopes is not None,
            "work_items": self.work_items is not None,
            "search_index": self.search_index is not None,
            "fanout": self.fanout is not None,
            "webhook_signature_verification": bool(self.payment.webhook_secret),
        }

    def enabled(self) -> List[str]:
        return [name for name, active in self.describe().items() if active]
