from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, field_validator

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int_best_effort(value: Any) -> int:
    """Leading-integer parse: ``"12abc"`` -> 12, ``"abc"`` -> 0, ``None`` -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


class SalesMetrics(BaseModel):
    clicks: int = 0
    sales: int = 0
    commissions: int = 0
    ctr: int = 0

    @field_validator("clicks", "sales", "commissions", "ctr", mode="before")
    @classmethod
    def coerce_int(cls, v):
        return parse_int_best_effort(v)


class _TextMetrics(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return ""
        return str(v)


class InstagramMetrics(_TextMetrics):
    reach: str = ""
    interactions: str = ""
    followers: str = ""
    follower_growth: str = ""
    reel_views: str = ""
    profile_clicks: str = ""


class FinancialMetrics(_TextMetrics):
    current_noi: str = ""
    noi_opportunity: str = ""
    portfolio_roi: str = ""
    vacancy_cost: str = ""
    turnover_risk: str = ""
    capex_due: str = ""


class MetricsResponse(BaseModel):
    variant: str
    metrics: dict[str, Any]
