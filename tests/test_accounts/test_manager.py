"""Tests for account bootstrap."""

import pytest

from bookkeeper.accounts.manager import AccountManager
from bookkeeper.accounts.schemas import Identity
from bookkeeper.errors import ValidationError

OWNER = "auth0|reader-1"


@pytest.fixture
def accounts(db) -> AccountManager:
    """Create an account manager on the test database."""
    return AccountManager(db)


class TestEnsureAccount:
    """Tests for first and repeat logins."""

    def test_first_login_creates_account(self, accounts: AccountManager, identity: Identity):
        account = accounts.ensure_account(identity)

        assert account.is_new_user is True
        assert account.user_id == OWNER
        assert account.email == "reader@example.com"
        assert account.display_name == "Test Reader"
        assert account.created_at == account.last_login

    def test_repeat_login(self, accounts: AccountManager, identity: Identity):
        """Test a second login reports an existing user and records the login."""
        first = accounts.ensure_account(identity)
        second = accounts.ensure_account(identity)

        assert second.is_new_user is False
        assert second.created_at == first.created_at
        assert second.last_login >= first.last_login

    def test_refreshes_profile(self, accounts: AccountManager, identity: Identity):
        """Test email and name follow the identity provider."""
        accounts.ensure_account(identity)
        account = accounts.ensure_account(
            Identity(owner_id=OWNER, email="new@example.com", name="Renamed")
        )

        assert account.email == "new@example.com"
        assert account.display_name == "Renamed"

    def test_missing_profile_fields_kept(self, accounts: AccountManager, identity: Identity):
        accounts.ensure_account(identity)
        account = accounts.ensure_account(Identity(owner_id=OWNER))

        assert account.email == "reader@example.com"
        assert account.display_name == "Test Reader"

    def test_blank_owner_rejected(self, accounts: AccountManager):
        with pytest.raises(ValidationError):
            accounts.ensure_account(Identity(owner_id="   "))

    def test_empty_owner_rejected_by_schema(self):
        with pytest.raises(ValueError):
            Identity(owner_id="")
