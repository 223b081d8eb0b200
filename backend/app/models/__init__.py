# Athena Flow Models
from app.models.base import BaseModel
from app.models.chat_message import ChatMessage
from app.models.resource import RESOURCE_TYPES, Resource
from app.models.schedule import RevisionSlot, ScheduleBlock
from app.models.skill import DiagnosticResult, Skill
from app.models.user import User

__all__ = [
    "BaseModel",
    "ChatMessage",
    "DiagnosticResult",
    "RESOURCE_TYPES",
    "Resource",
    "RevisionSlot",
    "ScheduleBlock",
    "Skill",
    "User",
]
