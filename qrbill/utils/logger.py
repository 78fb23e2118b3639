import logging
import json
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """
    Formatter to output logs in JSON format.
    Includes any ``ctx`` mapping attached through ``extra={"ctx": {...}}``.
    """
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "lineno": record.lineno,
        }

        ctx = getattr(record, "ctx", None)
        if ctx:
            log_record["ctx"] = ctx

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def setup_logger(level: str = "INFO", json_format: bool = False, stream=None) -> logging.Logger:
    """
    Configures the ``qrbill`` logger hierarchy.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, emit one JSON object per line (for container logging)
        stream: Output stream, stdout by default

    Returns:
        The configured ``qrbill`` logger.
    """
    root = logging.getLogger("qrbill")

    # Remove default handlers
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False

    root.debug("Logger setup complete.")
    return root
