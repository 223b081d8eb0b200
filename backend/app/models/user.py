"""User account model."""

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class User(BaseModel):
    """A student account.

    Email is stored lower-cased and is the login identifier. The profile
    fields (level, objectives) are filled in by the onboarding wizard.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    level: Mapped[str | None] = mapped_column(String(100), nullable=True)
    objectives: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    onboarding_complete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
