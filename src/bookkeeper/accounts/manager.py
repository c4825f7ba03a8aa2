"""Account bootstrap at session start."""

import logging
from typing import Optional

from ..db.models import utc_now
from ..db.sqlite import Database, get_db
from ..reading.progress import require_owner
from .models import Account
from .schemas import AccountResponse, Identity

logger = logging.getLogger(__name__)


class AccountManager:
    """Keeps the application's account table in step with the identity provider."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize account manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def ensure_account(self, identity: Identity) -> AccountResponse:
        """Create the account on first sight, otherwise record the login.

        Email and display name are refreshed from the identity when present.

        Args:
            identity: Verified identity

        Returns:
            Account details with ``is_new_user`` set on creation
        """
        require_owner(identity.owner_id)

        with self.db.get_session() as session:
            account = session.get(Account, identity.owner_id)
            is_new = account is None
            now = utc_now()

            if is_new:
                account = Account(
                    owner_id=identity.owner_id,
                    email=identity.email,
                    display_name=identity.name,
                    created_at=now,
                    last_login=now,
                )
                session.add(account)
                logger.info("Created account for %s", identity.owner_id)
            else:
                account.last_login = now
                if identity.email:
                    account.email = identity.email
                if identity.name:
                    account.display_name = identity.name

            session.flush()
            return self._to_response(account, is_new)

    def _to_response(self, account: Account, is_new: bool) -> AccountResponse:
        return AccountResponse(
            user_id=account.owner_id,
            email=account.email,
            display_name=account.display_name,
            is_new_user=is_new,
            created_at=account.created_at,
            last_login=account.last_login,
        )
