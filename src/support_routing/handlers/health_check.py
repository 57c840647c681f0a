"""Lightweight health check handler."""

import json
from datetime import datetime, timezone

from support_routing import __version__
from support_routing.config.settings import Settings


def lambda_handler(event, context):
    """Return a simple 200 response to verify the function is alive."""
    settings = Settings.from_environment()
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "status": "ok",
                "environment": settings.environment,
                "database_configured": settings.database_configured,
                "version": __version__,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        ),
    }
