from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class BundleCriticalAction(BaseModel):
    action: str = ""
    impact: str = ""
    urgency: str | None = None
    details: str = ""

    @field_validator("action", "impact", "details", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class AnalysisBundle(BaseModel):
    """Analysis returned by the remote workflow.

    The webhook nests ``executive_summary`` and ``critical_actions`` under an
    ``analysis`` object; the flat form is accepted as well.
    """

    executive_summary: str = ""
    critical_actions: list[BundleCriticalAction] = Field(default_factory=list)
    metrics: dict[str, Any] = Field(default_factory=dict)
    next_30_days: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def flatten_analysis(cls, data):
        if not isinstance(data, dict):
            return data
        nested = data.get("analysis")
        if not isinstance(nested, dict):
            return data
        flat = {key: value for key, value in data.items() if key != "analysis"}
        flat.setdefault("executive_summary", nested.get("executive_summary"))
        flat.setdefault("critical_actions", nested.get("critical_actions"))
        return flat

    @field_validator("executive_summary", mode="before")
    @classmethod
    def coerce_summary(cls, v):
        return _as_text(v)

    @field_validator("critical_actions", "next_30_days", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @field_validator("metrics", mode="before")
    @classmethod
    def none_as_empty_dict(cls, v):
        return {} if v is None else v

    def to_wire(self) -> dict[str, Any]:
        return {
            "analysis": {
                "executive_summary": self.executive_summary,
                "critical_actions": [action.model_dump() for action in self.critical_actions],
            },
            "metrics": dict(self.metrics),
            "next_30_days": list(self.next_30_days),
        }
