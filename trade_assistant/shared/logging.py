"""
Logging configuration for the application.

One line per record on stdout. Configured secrets (exchange and node API
keys, the custody private key) and bearer tokens are masked before any
handler formats a record.
"""

import logging
import re
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
REDACTED = "***REDACTED***"

NOISY_LOGGERS = ("uvicorn.access", "uvicorn.error", "httpx", "httpcore")

_BEARER = re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+")


class SecretRedactionFilter(logging.Filter):
    """Masks known secret values and bearer tokens in log messages.

    Addresses and transaction hashes are public on-chain data and are left
    alone, so only exact configured values are masked.

    Args:
        secrets: Secret values to mask. Empty and very short values are ignored.
    """

    def __init__(self, secrets: Iterable[str | None] = ()) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s and len(s) >= 6]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER.sub(f"Bearer {REDACTED}", message)
        for secret in self._secrets:
            redacted = redacted.replace(secret, REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def configure_logging(level: str = "INFO", secrets: Iterable[str | None] = ()) -> None:
    """Configure root logging and attach the redaction filter.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        secrets: Values that must never appear in log output.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    redaction = SecretRedactionFilter(secrets)
    for handler in logging.getLogger().handlers:
        handler.addFilter(redaction)

    # httpx logs every request URL at INFO, query strings included
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
