"""User accounts."""

from .manager import AccountManager
from .models import Account
from .schemas import AccountResponse, Identity

__all__ = [
    "AccountManager",
    "Account",
    "AccountResponse",
    "Identity",
]
