# crewtime/core/sentry_config.py
"""
Sentry configuration for error tracking in production.
"""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from crewtime.core.config import IS_PRODUCTION

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("cookie", "authorization", "x-api-key")


def init_sentry(production: bool = IS_PRODUCTION) -> bool:
    """
    Initialize Sentry error tracking.

    Returns:
        True if Sentry was initialized, False otherwise.
    """
    sentry_dsn = os.getenv("SENTRY_DSN", "").strip()

    if not production:
        logger.info("Sentry disabled in development mode")
        return False

    if not sentry_dsn:
        logger.warning(
            "SENTRY_DSN not set. Error tracking disabled. "
            "Set SENTRY_DSN environment variable to enable Sentry in production."
        )
        return False

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FastApiIntegration(),
                StarletteIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=0.1,
            sample_rate=1.0,
            release=os.getenv("RELEASE_VERSION", "crewtime@0.1.0"),
            environment=os.getenv("SENTRY_ENVIRONMENT", "production"),
            send_default_pii=False,
            attach_stacktrace=True,
            before_send=before_send_hook,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}", exc_info=True)
        return False

    logger.info(f"Sentry initialized (environment: {os.getenv('SENTRY_ENVIRONMENT', 'production')})")
    return True


def before_send_hook(event, hint):
    """
    Filter sensitive data before sending to Sentry.

    Args:
        event: Sentry event data
        hint: Additional context

    Returns:
        Modified event
    """
    request = event.get("request")
    if not request:
        return event

    headers = request.get("headers")
    if headers:
        for header in list(headers):
            if header.lower() in SENSITIVE_HEADERS:
                headers[header] = "[Filtered]"

    query = request.get("query_string")
    if query and ("password" in query.lower() or "token" in query.lower()):
        request["query_string"] = "[Filtered]"

    return event


def capture_exception(error: Exception, context: dict | None = None) -> None:
    """
    Capture an exception to Sentry with additional context.

    Args:
        error: Exception to capture
        context: Named context blocks to attach
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in (context or {}).items():
            scope.set_context(key, value)
        sentry_sdk.capture_exception(error)
