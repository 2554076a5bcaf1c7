"""Logging setup and Logfire cloud observability."""

import logging

import logfire

from squadboard import __version__
from squadboard.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging for the CLI and API server."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def initialize_logfire(settings: Settings, app=None, engine=None) -> bool:
    """
    Initialize Logfire with instrumentation.

    Must be called once at application startup. Instruments:
    - HTTPX clients (Polymarket data API)
    - FastAPI request handling, when an app is given
    - SQLAlchemy, when an engine is given
    - Python logging (bridges to Logfire)

    Returns:
        True if Logfire was configured, False if it was skipped or failed.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="squadboard",
            service_version=__version__,
            environment=settings.environment,
        )

        logfire.instrument_httpx()

        if app is not None:
            logfire.instrument_fastapi(app)

        if engine is not None:
            logfire.instrument_sqlalchemy(engine=engine)

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")
        return True

    except Exception as e:
        # Observability is optional
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False
