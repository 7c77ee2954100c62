"""
Logging configuration for the PintuKerja API.

Application logs go to the console and to pintukerja.log. Quota decisions
(usage consumed, admissions denied) are additionally written to
quota_audit.log so billing disputes can be answered without digging
through request logs.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

# Logger used by the quota service for consumed/denied records
QUOTA_AUDIT_LOGGER = "pintukerja.quota_audit"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
REDACTED = "***REDACTED***"
SENSITIVE_KEYS = ("password", "token", "secret", "api_key")


def _rotating_handler(path: Path, level: int, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """
    Configure application logging.

    Safe to call more than once: handlers installed by a previous call are
    replaced, not duplicated.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for pintukerja.log and quota_audit.log
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    root.addHandler(_rotating_handler(
        log_path / "pintukerja.log",
        level,
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
    ))

    # Audit records always reach their file, even when LOG_LEVEL is WARNING
    audit = logging.getLogger(QUOTA_AUDIT_LOGGER)
    audit.handlers.clear()
    audit.setLevel(logging.INFO)
    audit.addHandler(_rotating_handler(
        log_path / "quota_audit.log", logging.INFO, "%(asctime)s - %(message)s"
    ))

    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def mask_database_url(url: str) -> str:
    """Hide the password of a database URL, keeping driver, host and database."""
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return REDACTED


def sanitize_log_data(data: dict) -> dict:
    """
    Sanitize log data to remove sensitive information.

    Keys ending in "_url" have their password masked. Other keys that look
    like credentials are redacted. Nested dictionaries are sanitized too.

    Args:
        data: Dictionary to sanitize

    Returns:
        Sanitized copy of the dictionary
    """
    sanitized = {}
    for key, value in data.items():
        lowered = key.lower()
        if isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        elif lowered.endswith("_url") and isinstance(value, str):
            sanitized[key] = mask_database_url(value) if "://" in value else value
        elif any(sensitive in lowered for sensitive in SENSITIVE_KEYS):
            sanitized[key] = REDACTED
        else:
            sanitized[key] = value
    return sanitized
