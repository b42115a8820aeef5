"""Logging and Logfire setup."""

import logging
from typing import Optional

from fastapi import FastAPI

from teamthreads.settings import Settings

logger = logging.getLogger(__name__)

_logfire_configured: bool = False


def configure_logging(settings: Settings, app: Optional[FastAPI] = None) -> None:
    """Configure stdlib logging and, if a token is present, Logfire (one-time).

    Args:
        settings: Application settings with log level and Logfire options.
        app: Optional FastAPI app to instrument when Logfire is enabled.
    """
    global _logfire_configured

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if _logfire_configured:
        return

    if settings.logfire_token:
        try:
            import logfire

            logfire.configure(
                token=settings.logfire_token,
                send_to_logfire="if-token-present",
                service_name=settings.logfire_service_name,
                environment=settings.logfire_environment,
                console=logfire.ConsoleOptions(show_project_link=False),
            )
            logging.getLogger().addHandler(logfire.LogfireLoggingHandler())

            if app is not None:
                logfire.instrument_fastapi(app)

            logger.info(f"logfire_enabled: service={settings.logfire_service_name}")
        except Exception as e:
            logger.warning(f"logfire_initialization_failed: {str(e)}")
    else:
        logger.info("logfire_disabled: token not provided")

    _logfire_configured = True
