from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from portfolio_ceo.api.errors import raise_for_err
from portfolio_ceo.clients.webhook import WebhookClient, get_webhook_client
from portfolio_ceo.core.dependencies import get_bundle, get_local_store, get_metrics_variant
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.schemas.plan import PlanListResponse, PlanRequest, SubmissionResponse
from portfolio_ceo.services import plan_submission
from portfolio_ceo.services import plans as plans_service
from portfolio_ceo.storage.base import KeyValueStore

router = APIRouter(prefix="/api/plans", tags=["plans"])
logger = logging.getLogger("portfolio_ceo.api")


@router.get("", response_model=PlanListResponse)
def list_plans(store: KeyValueStore = Depends(get_local_store)) -> PlanListResponse:
    plans = plans_service.list_plans(store)
    return PlanListResponse(total=len(plans), items=plans)


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: PlanRequest | None = None,
    store: KeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    bundle: AnalysisBundle = Depends(get_bundle),
    variant: str = Depends(get_metrics_variant),
) -> SubmissionResponse:
    result = plans_service.create_plan(store, client, bundle, variant, plan_request=payload)
    if not result.is_ok:
        raise_for_err(result)
    response, plan = result.value
    return SubmissionResponse(
        action=plan_submission.ACTION_CREATE_PLAN,
        body=response.text,
        data=response.data,
        plan=plan,
    )


@router.post("/navigate", response_model=SubmissionResponse)
def navigate_to_plans(
    store: KeyValueStore = Depends(get_local_store),
    client: WebhookClient = Depends(get_webhook_client),
    bundle: AnalysisBundle = Depends(get_bundle),
    variant: str = Depends(get_metrics_variant),
) -> SubmissionResponse:
    context = plan_submission.context_from_store(store, plan_submission.ACTION_NAVIGATE_TO_PLANES, bundle, variant)
    result = plan_submission.submit(context, client)
    if not result.is_ok:
        raise_for_err(result)
    return SubmissionResponse(
        action=plan_submission.ACTION_NAVIGATE_TO_PLANES,
        body=result.value.text,
        data=result.value.data,
    )
