# nomina/core/sentry_config.py
"""
Sentry configuration for error tracking in production.
"""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

logger = logging.getLogger(__name__)

DEFAULT_RELEASE = "nomina@0.1.0"

#: Request headers never sent to Sentry.
SENSITIVE_HEADERS = ("cookie", "authorization", "x-api-key")


def init_sentry() -> bool:
    """
    Initialize Sentry error tracking.

    Only active when PRODUCTION=true and SENTRY_DSN is set.

    Returns:
        True if Sentry was initialized successfully, False otherwise.
    """
    is_production = os.getenv("PRODUCTION", "false").lower() == "true"
    sentry_dsn = os.getenv("SENTRY_DSN", "").strip()

    if not is_production:
        logger.info("Sentry disabled in development mode")
        return False

    if not sentry_dsn:
        logger.warning(
            "SENTRY_DSN not set. Error tracking disabled. "
            "Set SENTRY_DSN environment variable to enable Sentry in production."
        )
        return False

    environment = os.getenv("SENTRY_ENVIRONMENT", "production")
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
            release=os.getenv("RELEASE_VERSION", DEFAULT_RELEASE),
            environment=environment,
            send_default_pii=False,
            attach_stacktrace=True,
            before_send=before_send_hook,
        )
    except Exception:
        logger.error("Failed to initialize Sentry", exc_info=True)
        return False

    logger.info("Sentry initialized successfully (environment: %s)", environment)
    return True


def before_send_hook(event, hint):
    """
    Filter sensitive data before sending to Sentry.

    Salary figures travel in request bodies, so bodies are always dropped.
    """
    request = event.get("request")
    if request:
        headers = request.get("headers") or {}
        for header in SENSITIVE_HEADERS:
            if header in headers:
                headers[header] = "[Filtered]"
        if "data" in request:
            request["data"] = "[Filtered]"

    return event


def capture_exception(error: Exception, context: dict | None = None) -> None:
    """
    Capture an exception to Sentry with additional context.

    Args:
        error: Exception to capture
        context: Named context blocks, for example {"period": {"id": 3}}
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in (context or {}).items():
            scope.set_context(key, value)
        sentry_sdk.capture_exception(error)
