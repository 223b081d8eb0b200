"""Dashboard API endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_session
from app.core import get_db
from app.schemas.auth import UserResponse
from app.schemas.dashboard import DashboardResponse, DashboardStats, SkillResponse
from app.schemas.resource import ResourceResponse
from app.services.auth import SessionClaims
from app.services.profile import ProfileService
from app.services.resource import ResourceService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_RESOURCES_LIMIT = 5


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    session: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Get the profile, skills, latest resources and revision progress."""
    profile = ProfileService(db)
    resources = ResourceService(db)

    user = await profile.get_user(session.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    skills = await profile.list_skills(session.user_id)
    recent = await resources.list_for_user(session.user_id, limit=RECENT_RESOURCES_LIMIT)
    revisions = await profile.revision_stats(session.user_id)

    return DashboardResponse(
        user=UserResponse.model_validate(user),
        skills=[SkillResponse.model_validate(s) for s in skills],
        recent_resources=[ResourceResponse.model_validate(r) for r in recent],
        stats=DashboardStats(
            total_resources=await resources.count(session.user_id),
            completed_revisions=revisions.completed,
            total_revisions=revisions.total,
            completion_rate=revisions.completion_rate,
        ),
    )
