"""Onboarding API endpoints: diagnostic quiz and profile completion."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import bad_request, get_current_session
from app.core import get_db
from app.schemas.onboarding import (
    DiagnosticQuestionsResponse,
    OnboardingRequest,
    OnboardingResponse,
)
from app.services.auth import SessionClaims
from app.services.llm import CompletionClient, get_completion_client
from app.services.profile import DiagnosticOutcome, ProfileService
from app.services.sanitizer import sanitize_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

MAX_SUBJECT_LENGTH = 100
MAX_LEVEL_LENGTH = 100


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    """Dependency to get profile service."""
    return ProfileService(db)


@router.get("/diagnostic", response_model=DiagnosticQuestionsResponse)
async def get_diagnostic_questions(
    subject: str = Query("", description="Subject to assess"),
    session: SessionClaims = Depends(get_current_session),
    completion_client: CompletionClient = Depends(get_completion_client),
) -> DiagnosticQuestionsResponse:
    """Generate multiple-choice questions assessing a subject."""
    clean_subject = sanitize_text(subject)
    if not clean_subject or len(clean_subject) > MAX_SUBJECT_LENGTH:
        raise bad_request("Subject required")

    questions = await completion_client.generate_diagnostic_questions(clean_subject)
    return DiagnosticQuestionsResponse(questions=questions)


@router.post("", response_model=OnboardingResponse)
async def complete_onboarding(
    data: OnboardingRequest,
    session: SessionClaims = Depends(get_current_session),
    service: ProfileService = Depends(get_profile_service),
) -> OnboardingResponse:
    """Save level and objectives, record diagnostics and derive skill scores."""
    user = await service.get_user(session.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    level = sanitize_text(data.level) or None
    objectives = [o for o in (sanitize_text(obj) for obj in data.objectives) if o]
    if level is not None and len(level) > MAX_LEVEL_LENGTH:
        raise bad_request()

    outcomes = []
    for result in data.diagnostic_results:
        subject = sanitize_text(result.subject)
        if not subject or len(subject) > MAX_SUBJECT_LENGTH:
            raise bad_request()
        outcomes.append(
            DiagnosticOutcome(
                subject=subject,
                score=result.score,
                total=result.total,
                weak_areas=[w for w in (sanitize_text(a) for a in result.weak_areas) if w],
            )
        )

    await service.complete_onboarding(user, level=level, objectives=objectives, results=outcomes)
    return OnboardingResponse()
