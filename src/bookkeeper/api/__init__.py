"""HTTP API and identity provider integration."""

from .identity import (
    Auth0IdentityProvider,
    IdentityProvider,
    StaticIdentityProvider,
)
from .server import create_app, run_server

__all__ = [
    "Auth0IdentityProvider",
    "IdentityProvider",
    "StaticIdentityProvider",
    "create_app",
    "run_server",
]
