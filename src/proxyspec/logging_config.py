# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

import logging
import re

from .constants import DEFAULT_LOG_LEVEL, LOG_LEVELS


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials of spec strings in logs"""

    PATTERNS = {
        "userinfo": r"(?P<prefix>[a-z][a-z0-9+.-]*://)[^/@\s]+@",
        "auth": r"(?P<prefix>[?&]auth=)[^&\s]+",
    }

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()

        # user:pass@ in spec URLs
        message = re.sub(
            self.PATTERNS["userinfo"],
            r"\g<prefix>[MASKED_CREDENTIAL]@",
            message,
            flags=re.IGNORECASE,
        )

        # base64 auth option
        message = re.sub(self.PATTERNS["auth"], r"\g<prefix>[MASKED_CREDENTIAL]", message)

        record.msg = message
        record.args = None
        return True


def setup_logging(log_level: str = DEFAULT_LOG_LEVEL, mask_sensitive: bool = True):
    """Setup logging with optional sensitive data filtering"""

    root_logger = logging.getLogger()
    level = log_level.upper()
    if level not in LOG_LEVELS:
        level = DEFAULT_LOG_LEVEL
    root_logger.setLevel(getattr(logging, level))

    # Remove existing handlers to avoid duplication
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    if mask_sensitive:
        stream_handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(stream_handler)
