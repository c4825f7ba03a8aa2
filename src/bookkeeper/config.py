"""Configuration management for bookkeeper.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Logging
    log_level: str

    # HTTP server
    host: str
    port: int

    # Identity provider
    auth0_domain: Optional[str]
    identity_timeout: int  # seconds

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "BOOKKEEPER_DB_PATH",
            str(Path.home() / ".bookkeeper" / "books.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            log_level=os.environ.get("BOOKKEEPER_LOG_LEVEL", "INFO").upper(),
            host=os.environ.get("BOOKKEEPER_HOST", "0.0.0.0"),
            port=int(os.environ.get("BOOKKEEPER_PORT", "8000")),
            auth0_domain=os.environ.get("AUTH0_DOMAIN"),
            identity_timeout=int(os.environ.get("BOOKKEEPER_IDENTITY_TIMEOUT", "10")),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        # Check database directory is writable
        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.log_level}")

        if not 0 < self.port < 65536:
            errors.append(f"Port out of range: {self.port}")

        return errors

    def has_identity_config(self) -> bool:
        """Check if identity provider configuration is present."""
        return bool(self.auth0_domain)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
