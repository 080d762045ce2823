"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire

from wishlist_crawler.config import Settings


def setup_logfire(settings: Settings) -> None:
    """
    Initialize and configure Pydantic Logfire for observability.

    Sets up:
    - Logfire (sent to the cloud only when a token is configured)
    - httpx instrumentation (the webhook POST)
    - Pydantic instrumentation (model validation logging)
    - Environment-aware stdlib logging format
    """
    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "service_name": "wishlist-crawler",
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)
    logfire.instrument_httpx()
    logfire.instrument_pydantic()

    log_level = settings.log_level.upper()

    if settings.env == "local":
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logfire.LogfireLoggingHandler()],
        )
    else:
        # Logfire handles structured formatting
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(message)s",
            handlers=[logfire.LogfireLoggingHandler()],
        )
    # selenium and urllib3 are chatty at INFO
    logging.getLogger("selenium").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
