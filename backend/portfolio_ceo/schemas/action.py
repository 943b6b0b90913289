from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ActionKind = Literal["critical", "quick"]
Urgency = Literal["high", "medium", "low"]


class CriticalAction(BaseModel):
    id: str
    action: str = ""
    impact: str = ""
    urgency: str | None = None
    details: str = ""


class QuickAction(BaseModel):
    id: str
    action: str = ""


class CriticalActionCreate(BaseModel):
    action: str = Field(..., examples=["Aumentar rentas en Oak Street Apartments"])
    impact: str = Field("", examples=["+$28K anuales"])
    urgency: Urgency = Field("medium", examples=["high"])
    details: str = Field("", examples=["14 unidades están $200 bajo mercado."])


class CriticalActionUpdate(BaseModel):
    action: str | None = None
    impact: str | None = None
    urgency: Urgency | None = None
    details: str | None = None


class QuickActionCreate(BaseModel):
    action: str = Field(..., examples=["Llamar inquilinos para renovaciones"])


class QuickActionUpdate(BaseModel):
    action: str | None = None


class ActionListsResponse(BaseModel):
    critical_actions: list[CriticalAction] = Field(default_factory=list)
    quick_actions: list[QuickAction] = Field(default_factory=list)
