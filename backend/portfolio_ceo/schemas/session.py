from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Screen = Literal["welcome", "login", "onboarding", "dashboard"]


class AccessCodeRequest(BaseModel):
    access_code: str = Field(..., examples=["PremiumCEO"])


class AccountCodeRequest(BaseModel):
    code: str = Field(..., examples=["ABC12345"])


class AccountCodeResponse(BaseModel):
    code: str


class OnboardingRequest(BaseModel):
    metrics: dict[str, Any] = Field(default_factory=dict, examples=[{"clicks": "120", "sales": "4"}])


class ScreenResponse(BaseModel):
    screen: Screen
    user_code: str | None = None
    logged_in: bool = False
    onboarding_completed: bool = False
