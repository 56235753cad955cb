import logging
import sys

import structlog

from berkshelf_api_installer.config import get_settings

NAMESPACE = "berkshelf_api"


def get_logger(name: str | None = None):
    """
    Get a logger in the berkshelf_api namespace.

    Args:
        name: Module name (typically __name__). If None, returns the root berkshelf_api logger.

    Returns:
        A structlog logger whose stdlib name starts with berkshelf_api.
    """
    if name is None:
        return structlog.get_logger(NAMESPACE)
    return structlog.get_logger(f"{NAMESPACE}.{name}")


def quiet_third_party_loggers(debug_all: bool = False) -> None:
    """Set every logger created so far outside our namespace to WARNING."""
    if debug_all:
        return

    for log_name in list(logging.Logger.manager.loggerDict):
        if log_name != NAMESPACE and not log_name.startswith(f"{NAMESPACE}."):
            logging.getLogger(log_name).setLevel(logging.WARNING)


def format_context(logger, method_name, event_dict):
    """Append bound context (resource=..., owner=...) to the event message"""
    excluded = {"level", "timestamp", "logger", "stack", "exc_info", "event"}
    context = " ".join(f"{k}={v}" for k, v in event_dict.items() if k not in excluded)

    event = event_dict.get("event", "")
    event_dict["event"] = f"{event} [{context}]" if context else event

    return event_dict


def setup_logging(verbose: bool = False) -> None:
    """
    Route structlog through stdlib logging on stderr.

    Levels come from LoggingSettings:
        DEBUG_ALL: DEBUG for every logger, including third-party libraries.
        LOG_LEVEL: Level of the berkshelf_api namespace (default INFO).

    Args:
        verbose: Force DEBUG for the berkshelf_api namespace, whatever LOG_LEVEL says.
    """
    settings = get_settings().logging
    log_level = "DEBUG" if verbose else settings.log_level

    logging.basicConfig(
        stream=sys.stderr,
        level="DEBUG" if settings.debug_all else "WARNING",
        format="%(levelname)s:%(name)s: %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            format_context,
            structlog.stdlib.render_to_log_kwargs,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    quiet_third_party_loggers(settings.debug_all)

    logging.getLogger(NAMESPACE).setLevel(log_level)
