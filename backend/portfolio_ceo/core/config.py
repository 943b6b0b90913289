from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

MetricsVariant = Literal["sales", "instagram", "financial"]

DEFAULT_WEBHOOK_URL = "https://n8n.srv880021.hstgr.cloud/webhook/CeoPremium"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    database_url: str | None = None
    auth_enabled: bool = True
    dev_mode: bool = True
    secret_key: str | None = None
    session_cookie_name: str = "portfolio_ceo_session"
    session_ttl_days: int = 7
    access_code: str = "PremiumCEO"

    webhook_url: str = DEFAULT_WEBHOOK_URL
    webhook_timeout_s: float = 30.0
    metrics_variant: MetricsVariant = "financial"

    @property
    def session_cookie_secure(self) -> bool:
        return not self.dev_mode

    @property
    def required_secret_key(self) -> str:
        if self.secret_key:
            return self.secret_key
        if self.auth_enabled and not self.dev_mode:
            raise RuntimeError("SECRET_KEY must be set when AUTH_ENABLED=true and DEV_MODE=false.")
        return "portfolio-ceo-dev-secret"

    @property
    def sqlalchemy_database_uri(self) -> str:
        if self.database_url:
            return self.database_url
        repo_root = Path(__file__).resolve().parents[3]
        default_path = repo_root / "data" / "portfolio_ceo.db"
        default_path.parent.mkdir(exist_ok=True)
        return f"sqlite:///{default_path}"

    @property
    def DATABASE_URL(self) -> str:
        return self.sqlalchemy_database_uri


settings = Settings()
