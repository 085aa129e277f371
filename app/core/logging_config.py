"""Logging configuration: library noise reduction and secret redaction."""

import logging
import re
from typing import Pattern, Tuple

from app.core.config import settings


class RedactSecretsFilter(logging.Filter):
    """Filter that masks credentials before a record reaches any handler."""

    PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = (
        # OpenAI-style API keys
        (re.compile(r"sk-[A-Za-z0-9_\-]{8,}"), "sk-***"),
        # Passwords embedded in connection strings
        (re.compile(r"(://[^:/@\s]+:)[^@\s]+(@)"), r"\1***\2"),
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the message in place; never suppresses a record."""
        message = record.getMessage()
        redacted = self.redact(message)

        if redacted != message:
            record.msg = redacted
            record.args = None

        return True

    @classmethod
    def redact(cls, message: str) -> str:
        for pattern, replacement in cls.PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def configure_logging(level: str | None = None) -> None:
    """Configure application logging with secret redaction."""
    logger = logging.getLogger(__name__)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app_logger = logging.getLogger("app")
    app_logger.setLevel((level or settings.LOG_LEVEL).upper())

    filter_instance = RedactSecretsFilter()
    for handler in root.handlers:
        if not any(isinstance(f, RedactSecretsFilter) for f in handler.filters):
            handler.addFilter(filter_instance)

    # Suppress external library INFO/DEBUG logs (keep WARNING+)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={app_logger.level}, secret redaction enabled")
