import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _get_int(name: str, fallback: int) -> int:
    try:
        return int(os.getenv(name, str(fallback)))
    except ValueError:
        return fallback


def _get_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except ValueError:
        return fallback


@dataclass(frozen=True)
class Settings:
    port: int = _get_int("PORT", 3000)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    http_timeout_seconds: float = _get_float("HTTP_TIMEOUT_SECONDS", 10.0)
    sqlite_file: str = os.getenv("SQLITE_FILE", "./data/demo.db")

    stripe_secret_key: str = os.getenv("STRIPE_SECRET_KEY", "")
    stripe_webhook_secret: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    stripe_currency: str = os.getenv("STRIPE_CURRENCY", "usd")

    docusign_base_path: str = os.getenv(
        "DOCUSIGN_BASE_PATH", "https://demo.docusign.net/restapi"
    )
    docusign_account_id: str = os.getenv("DOCUSIGN_ACCOUNT_ID", "")
    docusign_access_token: str = os.getenv("DOCUSIGN_ACCESS_TOKEN", "")
    docusign_template_id: str = os.getenv("DOCUSIGN_TEMPLATE_ID", "")
    docusign_signer_role: str = os.getenv("DOCUSIGN_SIGNER_ROLE", "Signer")

    algolia_app_id: str = os.getenv("ALGOLIA_APP_ID", "")
    algolia_admin_key: str = os.getenv("ALGOLIA_ADMIN_KEY", "")
    algolia_index_name: str = os.getenv("ALGOLIA_INDEX_NAME", "onboard_demo")

    monday_api_key: str = os.getenv("MONDAY_API_KEY", "")
    monday_board_id: str = os.getenv("MONDAY_BOARD_ID", "")
    monday_api_url: str = os.getenv("MONDAY_API_URL", "https://api.monday.com/v2")

    zapier_webhook_url: str = os.getenv("ZAPIER_WEBHOOK_URL", "")

    @property
    def payment_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def envelopes_enabled(self) -> bool:
        return bool(
            self.docusign_access_token
            and self.docusign_account_id
            and self.docusign_template_id
        )

    @property
    def work_items_enabled(self) -> bool:
        return bool(self.monday_api_key and self.monday_board_id)

    @property
    def search_index_enabled(self) -> bool:
        return bool(self.algolia_app_id and self.algolia_admin_key)

    @property
    def fanout_enabled(self) -> bool:
        return bool(self.zapier_webhook_url)

    @property
    def webhook_signature_enabled(self) -> bool:
        return bool(self.stripe_webhook_secret)


settings = Settings()
