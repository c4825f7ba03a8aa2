"""Identity provider clients.

The backend never inspects tokens itself. It hands the presented bearer
credential to the provider and trusts the profile that comes back:
owner identifier (``sub``), email and display name.
"""

import logging
from typing import Optional, Protocol

import requests

from ..accounts.schemas import Identity
from ..errors import AuthenticationError

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Anything that can turn a credential into an Identity."""

    def verify(self, credential: str) -> Identity:
        """Verify a credential and return the identity it belongs to."""
        ...


class Auth0IdentityProvider:
    """Verifies access tokens against an Auth0 tenant's /userinfo endpoint."""

    def __init__(self, domain: str, timeout: int = 10):
        """Initialize client.

        Args:
            domain: Auth0 tenant domain, e.g. ``example.us.auth0.com``
            timeout: Request timeout in seconds
        """
        domain = domain.strip().rstrip("/")
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        self.base_url = domain
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": "BookKeeper/1.0"})

    def verify(self, credential: str) -> Identity:
        """Exchange an access token for the user's profile.

        Raises:
            AuthenticationError: If the token is rejected or the provider
                cannot be reached
        """
        if not credential:
            raise AuthenticationError("Missing credential")

        try:
            response = self._session.get(
                f"{self.base_url}/userinfo",
                headers={"Authorization": f"Bearer {credential}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            logger.warning("Identity provider timed out")
            raise AuthenticationError("Identity provider timed out")
        except requests.exceptions.HTTPError as e:
            raise AuthenticationError(f"Credential rejected: {e.response.status_code}")
        except requests.exceptions.JSONDecodeError:
            raise AuthenticationError("Identity provider returned invalid JSON")
        except requests.exceptions.RequestException as e:
            logger.warning("Identity provider request failed: %s", e)
            raise AuthenticationError(f"Identity provider request failed: {e}")

        owner_id = data.get("sub")
        if not owner_id:
            raise AuthenticationError("Identity provider response has no subject")

        return Identity(
            owner_id=owner_id,
            email=data.get("email"),
            name=data.get("name") or data.get("nickname"),
        )


class StaticIdentityProvider:
    """Maps fixed tokens to identities. For tests and local development."""

    def __init__(self, identities: Optional[dict[str, Identity]] = None):
        self.identities = dict(identities or {})

    def add(self, token: str, identity: Identity) -> None:
        """Register a token."""
        self.identities[token] = identity

    def verify(self, credential: str) -> Identity:
        identity = self.identities.get(credential)
        if identity is None:
            raise AuthenticationError("Credential rejected")
        return identity
