from __future__ import annotations

import logging
import re
from datetime import datetime

from portfolio_ceo.clients.webhook import WebhookClient, WebhookResponse
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.schemas.plan import PlanRecord, PlanRequest
from portfolio_ceo.services import plan_submission
from portfolio_ceo.services.result import Ok, Result
from portfolio_ceo.storage.base import PLANS_KEY, KeyValueStore, get_json, set_json

logger = logging.getLogger("portfolio_ceo.services")

_PLAN_ID_RE = re.compile(r"^plan-(\d+)$")


def list_plans(store: KeyValueStore) -> list[PlanRecord]:
    raw = get_json(store, PLANS_KEY, [])
    return [PlanRecord.model_validate(item) for item in raw]


def _next_plan_id(plans: list[PlanRecord]) -> str:
    highest = 0
    for plan in plans:
        match = _PLAN_ID_RE.match(plan.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"plan-{highest + 1}"


def append_plan(store: KeyValueStore, response: WebhookResponse, created_at: datetime | None = None) -> PlanRecord:
    plans = list_plans(store)
    content = response.data if response.is_json else response.text
    title = None
    if isinstance(response.data, dict):
        title = response.data.get("title")
    plan = PlanRecord(
        id=_next_plan_id(plans),
        title=str(title) if title else f"Plan {len(plans) + 1}",
        content=content,
        createdAt=plan_submission.format_timestamp(created_at),
    )
    plans.append(plan)
    set_json(store, PLANS_KEY, [item.model_dump() for item in plans])
    logger.info("Stored plan %s (%s)", plan.id, plan.title)
    return plan


def create_plan(
    store: KeyValueStore,
    client: WebhookClient,
    bundle: AnalysisBundle | None,
    variant: str,
    plan_request: PlanRequest | None = None,
) -> Result[tuple[WebhookResponse, PlanRecord]]:
    context = plan_submission.context_from_store(
        store,
        plan_submission.ACTION_CREATE_PLAN,
        bundle,
        variant,
        plan_request=plan_request,
    )
    result = plan_submission.submit(context, client)
    if not result.is_ok:
        return result
    plan = append_plan(store, result.value)
    return Ok((result.value, plan))
