from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from portfolio_ceo.schemas.metrics import FinancialMetrics, InstagramMetrics, SalesMetrics
from portfolio_ceo.storage.base import (
    FINANCIAL_METRICS_KEY,
    INSTAGRAM_METRICS_KEY,
    USER_METRICS_KEY,
    KeyValueStore,
    get_json,
    set_json,
)


@dataclass(frozen=True)
class MetricField:
    name: str
    label: str
    caption: str


@dataclass(frozen=True)
class MetricsVariantSpec:
    name: str
    storage_key: str
    model: type[BaseModel]
    fields: tuple[MetricField, ...]


SALES = MetricsVariantSpec(
    name="sales",
    storage_key=USER_METRICS_KEY,
    model=SalesMetrics,
    fields=(
        MetricField("clicks", "Clicks", "Affiliate link clicks"),
        MetricField("sales", "Sales", "Confirmed sales"),
        MetricField("commissions", "Commissions", "Commissions earned"),
        MetricField("ctr", "CTR", "Click-through rate"),
    ),
)

INSTAGRAM = MetricsVariantSpec(
    name="instagram",
    storage_key=INSTAGRAM_METRICS_KEY,
    model=InstagramMetrics,
    fields=(
        MetricField("reach", "Reach", "Accounts reached"),
        MetricField("interactions", "Interactions", "Likes, comments, shares and saves"),
        MetricField("followers", "Followers", "Total audience"),
        MetricField("follower_growth", "Follower Growth", "New followers this period"),
        MetricField("reel_views", "Reel Views", "Views across reels"),
        MetricField("profile_clicks", "Profile Clicks", "Visits to the profile"),
    ),
)

FINANCIAL = MetricsVariantSpec(
    name="financial",
    storage_key=FINANCIAL_METRICS_KEY,
    model=FinancialMetrics,
    fields=(
        MetricField("current_noi", "Current NOI", "Monthly recurring income"),
        MetricField("noi_opportunity", "NOI Opportunity", "Potential additional income"),
        MetricField("portfolio_roi", "Portfolio ROI", "Annual return on investment"),
        MetricField("vacancy_cost", "Vacancy Cost", "Monthly lost revenue"),
        MetricField("turnover_risk", "Turnover Risk", "Units requiring attention"),
        MetricField("capex_due", "CapEx Due", "Immediate capital required"),
    ),
)

VARIANTS: dict[str, MetricsVariantSpec] = {spec.name: spec for spec in (SALES, INSTAGRAM, FINANCIAL)}


def get_variant(name: str) -> MetricsVariantSpec:
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError(f"Metrics variant must be one of: {', '.join(VARIANTS)}.") from None


def coerce_metrics(variant: str, fields: dict[str, Any]) -> dict[str, Any]:
    spec = get_variant(variant)
    known = {field.name for field in spec.fields}
    return spec.model.model_validate({k: v for k, v in fields.items() if k in known}).model_dump()


def get_metrics(store: KeyValueStore, variant: str) -> dict[str, Any]:
    spec = get_variant(variant)
    stored = get_json(store, spec.storage_key)
    if not isinstance(stored, dict):
        return spec.model().model_dump()
    return coerce_metrics(variant, stored)


def save_metrics(store: KeyValueStore, variant: str, fields: dict[str, Any]) -> dict[str, Any]:
    spec = get_variant(variant)
    metrics = coerce_metrics(variant, fields)
    set_json(store, spec.storage_key, metrics)
    return metrics


def has_any_value(fields: dict[str, Any]) -> bool:
    return any(str(value).strip() for value in fields.values() if value is not None)
