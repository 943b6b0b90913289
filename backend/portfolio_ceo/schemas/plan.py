from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class PlanRequest(BaseModel):
    nombre_plan: str = Field(..., examples=["Plan de Expansión Miami"])
    duracion: str = Field(..., examples=["4 meses"])
    roi_esperado: str = Field(..., examples=["300%"])
    especificaciones: str = Field(..., examples=["Aumentar mi ROI en Miami y Ohio."])
    numero_planes: int | None = Field(None, ge=1, examples=[5])

    @field_validator("nombre_plan", "duracion", "roi_esperado", "especificaciones")
    @classmethod
    def required_text(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Field is required.")
        return cleaned


class PlanRecord(BaseModel):
    id: str
    title: str
    content: Any = None
    createdAt: str


class PlanListResponse(BaseModel):
    total: int
    items: list[PlanRecord]


class SubmissionResponse(BaseModel):
    action: str
    body: str
    data: Any = None
    plan: PlanRecord | None = None


class SummaryResponse(BaseModel):
    summary: str
