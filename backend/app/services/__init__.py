# Athena Flow Services
from app.services.auth import AuthService
from app.services.chat import ChatService
from app.services.llm import CompletionClient, get_completion_client
from app.services.profile import ProfileService
from app.services.rate_limiter import RateLimiter, get_rate_limiter
from app.services.resource import ResourceService
from app.services.schedule import ScheduleService

__all__ = [
    "AuthService",
    "ChatService",
    "CompletionClient",
    "ProfileService",
    "RateLimiter",
    "ResourceService",
    "ScheduleService",
    "get_completion_client",
    "get_rate_limiter",
]
