"""SQLAlchemy models for user accounts."""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base, utc_now


class Account(Base):
    """Application-side record of an identity-provider user."""

    __tablename__ = "accounts"

    owner_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(320))
    display_name: Mapped[Optional[str]] = mapped_column(String(200))
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    last_login: Mapped[str] = mapped_column(String(32), default=utc_now)

    def __repr__(self) -> str:
        return f"<Account(owner_id='{self.owner_id}', email='{self.email}')>"
