# explainer/logging.py
import logging
import os
import sys

_LOGGER_NAME = "explainer"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _env_level() -> int:
    v = os.environ.get("EXPLAINER_LOG_LEVEL")
    if not v:
        return logging.INFO
    return _LEVELS.get(v.strip().upper(), logging.INFO)


def init_logging() -> logging.Logger:
    """Attach exactly one stream handler to the project logger.

    Streamlit re-runs the page script on every interaction, so this is called
    many times per process; existing stream handlers are replaced rather than
    stacked.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    lvl = _env_level()
    logger.setLevel(lvl)

    for h in list(logger.handlers):
        if isinstance(h, logging.StreamHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.setLevel(lvl)
    logger.addHandler(handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
