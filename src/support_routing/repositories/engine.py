"""SQLAlchemy engine construction.

To keep local runs working without a live database, a missing DATABASE_URL
and secret returns None instead of raising.
"""

from __future__ import annotations

import json
from typing import Optional

import boto3
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from support_routing.config.settings import Settings
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


def create_db_engine(settings: Settings) -> Optional[Engine]:
    """Create a pooled engine sized for a single Lambda container."""
    db_url = settings.database_url
    if not db_url:
        if settings.db_secret_arn:
            db_url = secret_to_db_url(settings.db_secret_arn, settings.aws_region)
        else:
            logger.warning("DATABASE_URL not set; DB calls will be skipped")
            return None
    if not db_url:
        return None
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


def secret_to_db_url(secret_arn: str, region: Optional[str] = None) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    try:
        sm = boto3.client("secretsmanager", region_name=region)
        secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    except Exception as exc:
        logger.warning("Failed to load DB secret", extra={"error": str(exc)})
        return None

    host = secret.get("host")
    port = secret.get("port", 5432)
    username = secret.get("username")
    password = secret.get("password")
    dbname = secret.get("dbname", "postgres")
    if not (host and username and password):
        logger.warning("DB secret is missing host or credentials")
        return None
    return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"
