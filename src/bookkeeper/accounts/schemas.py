"""Pydantic schemas for accounts and verified identities."""

from typing import Optional

from pydantic import Field

from ..db.schemas import CamelModel


class Identity(CamelModel):
    """A user as vouched for by the identity provider."""

    owner_id: str = Field(..., min_length=1, alias="userId")
    email: Optional[str] = None
    name: Optional[str] = None


class AccountResponse(CamelModel):
    """Result of the session-start account check."""

    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    is_new_user: bool
    created_at: str
    last_login: str
