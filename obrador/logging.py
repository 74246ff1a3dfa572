import logging
import sys

from obrador.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Client libraries that log every request or SMTP exchange at INFO/DEBUG.
NOISY_LOGGERS = ("httpx", "httpcore", "aiosmtplib")


def _build_formatter() -> logging.Formatter:
    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    return logging.Formatter(TEXT_FORMAT)


def _build_handler() -> logging.Handler:
    if settings.log_file:
        return logging.FileHandler(settings.log_file, encoding="utf-8")
    return logging.StreamHandler(sys.stderr)


def configure_logging() -> None:
    """Configure the root logger based on settings.

    Logs go to stderr, or to ``OBRADOR_LOG_FILE`` when set so they do not
    interleave with the interactive menus. Call ``reconfigure()`` after
    Alembic's ``fileConfig`` has replaced the root handlers.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = _build_handler()
    handler.setFormatter(_build_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    for old in root.handlers[:]:
        root.removeHandler(old)
        if isinstance(old, logging.FileHandler):
            old.close()
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


reconfigure = configure_logging
