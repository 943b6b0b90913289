from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from portfolio_ceo.schemas.action import CriticalAction, QuickAction


class DashboardResponse(BaseModel):
    executive_summary: str = ""
    key_metrics: dict[str, Any] = Field(default_factory=dict)
    next_30_days: list[str] = Field(default_factory=list)
    is_fallback: bool = False
    metrics_variant: str
    metrics: dict[str, Any] = Field(default_factory=dict)
    critical_actions: list[CriticalAction] = Field(default_factory=list)
    quick_actions: list[QuickAction] = Field(default_factory=list)
    user_code: str | None = None
