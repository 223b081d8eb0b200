# Athena Flow Pydantic Schemas
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.schemas.chat import (
    ChatExchangeResponse,
    ChatHistoryResponse,
    ChatMessageResponse,
    ChatRequest,
)
from app.schemas.common import CamelModel, MessageResponse
from app.schemas.dashboard import DashboardResponse, DashboardStats, SkillResponse
from app.schemas.onboarding import (
    DiagnosticQuestionsResponse,
    DiagnosticResultInput,
    OnboardingRequest,
    OnboardingResponse,
)
from app.schemas.resource import ResourceCreate, ResourceListResponse, ResourceResponse
from app.schemas.schedule import (
    RevisionSlotListResponse,
    RevisionSlotResponse,
    ScheduleBlockCreate,
    ScheduleBlockResponse,
    ScheduleResponse,
)

__all__ = [
    "AuthResponse",
    "CamelModel",
    "ChatExchangeResponse",
    "ChatHistoryResponse",
    "ChatMessageResponse",
    "ChatRequest",
    "DashboardResponse",
    "DashboardStats",
    "DiagnosticQuestionsResponse",
    "DiagnosticResultInput",
    "LoginRequest",
    "MessageResponse",
    "OnboardingRequest",
    "OnboardingResponse",
    "RegisterRequest",
    "ResourceCreate",
    "ResourceListResponse",
    "ResourceResponse",
    "RevisionSlotListResponse",
    "RevisionSlotResponse",
    "ScheduleBlockCreate",
    "ScheduleBlockResponse",
    "ScheduleResponse",
    "SkillResponse",
    "UserResponse",
]
