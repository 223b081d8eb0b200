"""Pydantic schemas for the onboarding API."""

from pydantic import Field, model_validator

from app.schemas.common import CamelModel
from app.services.llm import DiagnosticQuestion


class DiagnosticResultInput(CamelModel):
    """Score obtained on one subject's diagnostic quiz."""

    subject: str
    score: int = Field(..., ge=0)
    total: int = Field(..., gt=0)
    weak_areas: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_score_within_total(self) -> "DiagnosticResultInput":
        if self.score > self.total:
            raise ValueError("score cannot exceed total")
        return self


class OnboardingRequest(CamelModel):
    level: str | None = None
    objectives: list[str] = Field(default_factory=list)
    diagnostic_results: list[DiagnosticResultInput] = Field(default_factory=list)


class DiagnosticQuestionsResponse(CamelModel):
    questions: list[DiagnosticQuestion]


class OnboardingResponse(CamelModel):
    success: bool = True
