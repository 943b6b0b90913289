from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from portfolio_ceo.clients.webhook import WebhookClient
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.services import plan_submission
from portfolio_ceo.services.result import Err, ErrorKind, Ok, Result
from portfolio_ceo.storage.base import LAST_ANALYSIS_KEY, KeyValueStore, get_json, set_json

logger = logging.getLogger("portfolio_ceo.services")

FALLBACK_EXECUTIVE_SUMMARY = (
    "Tu portfolio tiene 3 oportunidades inmediatas que pueden generar $156K adicionales este año."
)

FALLBACK_CRITICAL_ACTIONS: list[dict[str, str]] = [
    {
        "action": "Aumentar rentas en Oak Street Apartments",
        "impact": "+$28K anuales",
        "urgency": "high",
        "details": "14 unidades están $200 bajo mercado. Enviar avisos de 60 días esta semana.",
    },
    {
        "action": "Reducir precio Downtown Loft 3B",
        "impact": "+$18K anuales",
        "urgency": "medium",
        "details": "Unidad vacante 90 días. Reducir $150/mes para ocupar rápido.",
    },
    {
        "action": "Refinanciar Maple Heights Complex",
        "impact": "+$110K anuales",
        "urgency": "high",
        "details": "Tasas bajaron 1.2%. Refinanciar ahora ahorra $9.2K/mes.",
    },
]

FALLBACK_NEXT_30_DAYS: list[str] = [
    "Enviar avisos aumento renta Oak Street",
    "Reducir precio Downtown Loft 3B",
    "Llamar inquilinos para renovaciones",
    "Programar mantenimiento HVAC Maple Heights",
]

FALLBACK_METRICS: dict[str, dict[str, Any]] = {
    "financial": {
        "current_noi": "$847K",
        "noi_opportunity": "$156K",
        "portfolio_roi": "14.2%",
        "vacancy_cost": "$23K",
        "turnover_risk": "6 units",
        "capex_due": "$45K",
    },
    "instagram": {
        "reach": "50K",
        "interactions": "5.2K",
        "followers": "25K",
        "follower_growth": "+150",
        "reel_views": "120K",
        "profile_clicks": "850",
    },
    "sales": {"clicks": 0, "sales": 0, "commissions": 0, "ctr": 0},
}


def fallback_bundle(variant: str = "financial") -> AnalysisBundle:
    return AnalysisBundle(
        executive_summary=FALLBACK_EXECUTIVE_SUMMARY,
        critical_actions=FALLBACK_CRITICAL_ACTIONS,
        metrics=FALLBACK_METRICS.get(variant, FALLBACK_METRICS["financial"]),
        next_30_days=FALLBACK_NEXT_30_DAYS,
    )


def fetch_bundle(client: WebhookClient) -> Result[AnalysisBundle]:
    result = client.fetch()
    if not result.is_ok:
        return result
    data = result.value.data
    # n8n "respond with all items" wraps the object in a list
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        return Err(ErrorKind.INVALID_RESPONSE, "Error: analysis response is not a JSON object")
    try:
        return Ok(AnalysisBundle.model_validate(data))
    except ValidationError as exc:
        return Err(ErrorKind.INVALID_RESPONSE, f"Error: invalid analysis payload ({exc.error_count()} errors)")


def cached_bundle(store: KeyValueStore) -> AnalysisBundle | None:
    raw = get_json(store, LAST_ANALYSIS_KEY)
    if raw is None:
        return None
    return AnalysisBundle.model_validate(raw)


def load_bundle(
    store: KeyValueStore,
    client: WebhookClient,
    variant: str = "financial",
    refresh: bool = False,
) -> tuple[AnalysisBundle, bool]:
    """Return ``(bundle, is_fallback)``.

    The last fetched bundle is cached in the store. When the webhook is
    unavailable the demo bundle is returned and nothing is cached, so the next
    load tries the webhook again.
    """
    if not refresh:
        cached = cached_bundle(store)
        if cached is not None:
            return cached, False

    result = fetch_bundle(client)
    if result.is_ok:
        bundle = result.value
        set_json(store, LAST_ANALYSIS_KEY, bundle.to_wire())
        return bundle, False

    logger.warning("Analysis unavailable, using fallback bundle: %s", result.message)
    return fallback_bundle(variant), True


def regenerate_summary(
    store: KeyValueStore,
    client: WebhookClient,
    bundle: AnalysisBundle | None,
    variant: str,
) -> Result[str]:
    context = plan_submission.context_from_store(
        store,
        plan_submission.ACTION_GENERATE_EXECUTIVE_SUMMARY,
        bundle,
        variant,
    )
    result = plan_submission.submit(context, client)
    if not result.is_ok:
        return result
    return Ok(result.value.text)
