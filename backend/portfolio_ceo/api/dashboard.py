from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import ValidationError

from portfolio_ceo.api.errors import raise_for_err
from portfolio_ceo.clients.webhook import WebhookClient, get_webhook_client
from portfolio_ceo.core.dependencies import get_bundle, get_local_store, get_metrics_variant
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.schemas.dashboard import DashboardResponse
from portfolio_ceo.schemas.metrics import MetricsResponse
from portfolio_ceo.schemas.plan import SummaryResponse
from portfolio_ceo.services import analysis as analysis_service
from portfolio_ceo.services import metrics as metrics_service
from portfolio_ceo.services.action_lists import ActionListManager
from portfolio_ceo.storage.base import USER_CODE_KEY, KeyValueStore

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
logger = logging.getLogger("portfolio_ceo.api")


def _build_dashboard(
    store: KeyValueStore,
    bundle: AnalysisBundle,
    variant: str,
    is_fallback: bool,
) -> DashboardResponse:
    critical_actions, quick_actions = ActionListManager(store, bundle).load()
    return DashboardResponse(
        executive_summary=bundle.executive_summary,
        key_metrics=bundle.metrics,
        next_30_days=bundle.next_30_days,
        is_fallback=is_fallback,
        metrics_variant=variant,
        metrics=metrics_service.get_metrics(store, variant),
        critical_actions=critical_actions,
        quick_actions=quick_actions,
        user_code=store.get(USER_CODE_KEY),
    )


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    store: KeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    variant: str = Depends(get_metrics_variant),
) -> DashboardResponse:
    bundle, is_fallback = analysis_service.load_bundle(store, client, variant)
    return _build_dashboard(store, bundle, variant, is_fallback)


@router.post("/refresh", response_model=DashboardResponse)
def refresh_dashboard(
    reseed: bool = Query(default=False),
    store: KeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    variant: str = Depends(get_metrics_variant),
) -> DashboardResponse:
    bundle, is_fallback = analysis_service.load_bundle(store, client, variant, refresh=True)
    if reseed:
        if is_fallback:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Error: analysis unavailable, action lists were not reseeded",
            )
        ActionListManager(store).reseed(bundle)
        logger.info("Action lists reseeded from refreshed analysis")
    return _build_dashboard(store, bundle, variant, is_fallback)


@router.get("/metrics", response_model=MetricsResponse)
def get_metrics(
    store: KeyValueStore = Depends(get_local_store),
    variant: str = Depends(get_metrics_variant),
) -> MetricsResponse:
    return MetricsResponse(variant=variant, metrics=metrics_service.get_metrics(store, variant))


@router.put("/metrics", response_model=MetricsResponse)
def save_metrics(
    payload: dict[str, Any] = Body(...),
    store: KeyValueStore = Depends(get_local_store),
    variant: str = Depends(get_metrics_variant),
) -> MetricsResponse:
    try:
        metrics = metrics_service.save_metrics(store, variant, payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return MetricsResponse(variant=variant, metrics=metrics)


@router.post("/summary", response_model=SummaryResponse)
def regenerate_summary(
    store: KeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    bundle: AnalysisBundle = Depends(get_bundle),
    variant: str = Depends(get_metrics_variant),
) -> SummaryResponse:
    result = analysis_service.regenerate_summary(store, client, bundle, variant)
    if not result.is_ok:
        raise_for_err(result)
    return SummaryResponse(summary=result.value)
