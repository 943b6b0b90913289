from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portfolio_ceo.clients.webhook import WebhookClient, get_webhook_client
from portfolio_ceo.core.auth import get_client_id
from portfolio_ceo.core.config import settings
from portfolio_ceo.db.session import get_db
from portfolio_ceo.models.kv_entry import SCOPE_SESSION
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.services import analysis as analysis_service
from portfolio_ceo.storage.sql import SqlKeyValueStore

# Account codes are shared by every client, like the browser-wide list they replace.
REGISTRY_NAMESPACE = "__accounts__"


def get_local_store(request: Request, db: Session = Depends(get_db)) -> SqlKeyValueStore:
    return SqlKeyValueStore(db, get_client_id(request))


def get_session_store(request: Request, db: Session = Depends(get_db)) -> SqlKeyValueStore:
    return SqlKeyValueStore(db, get_client_id(request), scope=SCOPE_SESSION)


def get_registry_store(db: Session = Depends(get_db)) -> SqlKeyValueStore:
    return SqlKeyValueStore(db, REGISTRY_NAMESPACE)


def get_metrics_variant() -> str:
    return settings.metrics_variant


def get_bundle(
    store: SqlKeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    variant: str = Depends(get_metrics_variant),
) -> AnalysisBundle:
    bundle, _ = analysis_service.load_bundle(store, client, variant)
    return bundle


def get_bundle_loader(
    store: SqlKeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    variant: str = Depends(get_metrics_variant),
) -> Callable[[], AnalysisBundle]:
    """Deferred :func:`get_bundle`; the webhook is only hit if the loader is called."""

    def _load() -> AnalysisBundle:
        bundle, _ = analysis_service.load_bundle(store, client, variant)
        return bundle

    return _load
