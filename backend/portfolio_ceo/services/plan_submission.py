"""Outbound payload for the remote analytics workflow.

The payload carries the action lists twice: once as structured records
(``top_opportunities``, ``quick_actions``) and once inside ``dashboard_text``,
a plain-text rendering of the whole dashboard consumed by the workflow's
language model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from portfolio_ceo.clients.webhook import WebhookClient, WebhookResponse
from portfolio_ceo.schemas.action import CriticalAction, QuickAction
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.schemas.plan import PlanRequest
from portfolio_ceo.services import metrics as metrics_service
from portfolio_ceo.services.action_lists import ActionListManager
from portfolio_ceo.services.result import Result
from portfolio_ceo.storage.base import USER_CODE_KEY, KeyValueStore

logger = logging.getLogger("portfolio_ceo.services")

ACTION_NAVIGATE_TO_PLANES = "navigate_to_planes"
ACTION_CREATE_PLAN = "create_plan"
ACTION_GENERATE_EXECUTIVE_SUMMARY = "generate_executive_summary"
SUBMISSION_ACTIONS = (ACTION_NAVIGATE_TO_PLANES, ACTION_CREATE_PLAN, ACTION_GENERATE_EXECUTIVE_SUMMARY)

PRIORITY_BY_URGENCY = {"high": "ALTA", "medium": "MEDIA"}
DEFAULT_PRIORITY = "BAJA"


@dataclass
class SubmissionContext:
    action: str
    critical_actions: list[CriticalAction] = field(default_factory=list)
    quick_actions: list[QuickAction] = field(default_factory=list)
    metrics: dict[str, Any] = field(default_factory=dict)
    metrics_variant: str = "financial"
    executive_summary: str = ""
    key_metrics: dict[str, Any] = field(default_factory=dict)
    user_code: str | None = None
    timestamp: datetime | None = None
    plan_request: PlanRequest | None = None


def priority_for(urgency: str | None) -> str:
    return PRIORITY_BY_URGENCY.get(urgency or "", DEFAULT_PRIORITY)


def project_critical_action(action: CriticalAction) -> dict[str, Any]:
    return {
        "titulo": action.action,
        "descripcion": action.details,
        "valor_anual": action.impact,
        "prioridad": priority_for(action.urgency),
    }


def project_quick_action(action: QuickAction) -> dict[str, Any]:
    return {"descripcion": action.action, "completada": False}


def format_timestamp(value: datetime | None = None) -> str:
    moment = value or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _caption_lookup() -> dict[str, metrics_service.MetricField]:
    lookup: dict[str, metrics_service.MetricField] = {}
    for spec in metrics_service.VARIANTS.values():
        for metric_field in spec.fields:
            lookup.setdefault(metric_field.name, metric_field)
    return lookup


def _display(value: Any) -> str:
    if value is None or value == "":
        return "N/A"
    return str(value)


def render_dashboard_text(context: SubmissionContext, timestamp: str) -> str:
    lines: list[str] = [
        "PORTFOLIO CEO DASHBOARD",
        f"User code: {context.user_code or 'N/A'}",
        f"Generated: {timestamp}",
        "",
        "CURRENT METRICS",
    ]
    variant = metrics_service.get_variant(context.metrics_variant)
    for metric_field in variant.fields:
        lines.append(f"- {metric_field.label}: {_display(context.metrics.get(metric_field.name))}")

    lines += ["", "EXECUTIVE SUMMARY", context.executive_summary.strip() or "N/A", "", "KEY METRICS"]
    captions = _caption_lookup()
    if context.key_metrics:
        for name, value in context.key_metrics.items():
            known = captions.get(name)
            if known:
                lines.append(f"- {known.label}: {_display(value)} ({known.caption})")
            else:
                lines.append(f"- {name.replace('_', ' ').title()}: {_display(value)}")
    else:
        lines.append("- None")

    lines += ["", "TOP OPPORTUNITIES"]
    if context.critical_actions:
        for index, action in enumerate(context.critical_actions, start=1):
            lines.append(f"{index}. {action.action} | {_display(action.impact)} | Priority: {priority_for(action.urgency)}")
            if action.details.strip():
                lines.append(f"   {action.details.strip()}")
    else:
        lines.append("- None")

    lines += ["", "QUICK ACTIONS (NEXT 30 DAYS)"]
    if context.quick_actions:
        for index, action in enumerate(context.quick_actions, start=1):
            lines.append(f"{index}. {action.action}")
    else:
        lines.append("- None")

    if context.plan_request is not None:
        request = context.plan_request
        lines += [
            "",
            "PLAN REQUEST",
            f"- Name: {request.nombre_plan}",
            f"- Duration: {request.duracion}",
            f"- Expected ROI: {request.roi_esperado}",
            f"- Specifications: {request.especificaciones}",
            f"- Number of plans: {_display(request.numero_planes)}",
        ]
    return "\n".join(lines)


def build_payload(context: SubmissionContext) -> dict[str, Any]:
    timestamp = format_timestamp(context.timestamp)
    payload: dict[str, Any] = {
        "action": context.action,
        "timestamp": timestamp,
        "userCode": context.user_code,
        "metrics": dict(context.metrics),
        "executive_summary": context.executive_summary,
        "top_opportunities": [project_critical_action(action) for action in context.critical_actions],
        "quick_actions": [project_quick_action(action) for action in context.quick_actions],
        "dashboard_text": render_dashboard_text(context, timestamp),
    }
    if context.plan_request is not None:
        payload["plan_request"] = context.plan_request.model_dump()
    return payload


def context_from_store(
    store: KeyValueStore,
    action: str,
    bundle: AnalysisBundle | None,
    metrics_variant: str,
    plan_request: PlanRequest | None = None,
    timestamp: datetime | None = None,
) -> SubmissionContext:
    critical_actions, quick_actions = ActionListManager(store, bundle).load()
    return SubmissionContext(
        action=action,
        critical_actions=critical_actions,
        quick_actions=quick_actions,
        metrics=metrics_service.get_metrics(store, metrics_variant),
        metrics_variant=metrics_variant,
        executive_summary=bundle.executive_summary if bundle else "",
        key_metrics=dict(bundle.metrics) if bundle else {},
        user_code=store.get(USER_CODE_KEY),
        timestamp=timestamp,
        plan_request=plan_request,
    )


def submit(context: SubmissionContext, client: WebhookClient) -> Result[WebhookResponse]:
    payload = build_payload(context)
    logger.info(
        "Submitting %s with %d critical and %d quick actions",
        context.action,
        len(context.critical_actions),
        len(context.quick_actions),
    )
    return client.post(payload)
