"""
Environment-specific configuration settings.

Small pool defaults keep Lambda connection counts low against the shared database.
"""

from dataclasses import dataclass
import os
from typing import Optional


@dataclass
class Settings:
    """Application settings with Lambda-friendly defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"  # Default AWS region
    log_level: str = "INFO"

    # Database Configuration
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None
    db_pool_size: int = 1
    db_max_overflow: int = 2
    db_pool_recycle_seconds: int = 300

    @property
    def database_configured(self) -> bool:
        """True when either a URL or a secret to build one is available."""
        return bool(self.database_url or self.db_secret_arn)

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        common = dict(
            environment=env,
            aws_region=os.environ.get("AWS_REGION", "eu-west-2"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
        )

        # Production overrides
        if env == "prod":
            return cls(
                **common,
                db_pool_size=int(os.environ.get("DB_POOL_SIZE", "2")),
                db_max_overflow=int(os.environ.get("DB_MAX_OVERFLOW", "4")),
            )

        return cls(
            **common,
            db_pool_size=int(os.environ.get("DB_POOL_SIZE", "1")),
            db_max_overflow=int(os.environ.get("DB_MAX_OVERFLOW", "2")),
        )
