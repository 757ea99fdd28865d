"""Logger setup for vcfmulti2one.

All diagnostics go to stderr so that a VCF written to stdout (`-o -`) stays
clean and can be piped into bcftools or tabix.
"""

import logging
import sys
import time
import json
from typing import Optional

__all__ = ["JsonFormatter", "setup_logger"]


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log collectors watching long runs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single-line JSON object.

        Args:
            record: LogRecord to format

        Returns:
            JSON-formatted log string
        """
        payload = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logger(
    name: str,
    level: Optional[str] = None,
    format_type: str = "text",
    verbose: bool = True,
) -> logging.Logger:
    """Configure the application logger ('vcfmulti2one') once per process.

    Calling it again only changes the level, so the CLI and in-process runs
    of Multi2OneApp share one stderr handler. Messages do not propagate to
    the root logger.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR) or None for default
        format_type: Output format: "text" or "json"
        verbose: Whether to use verbose logging (INFO vs WARNING default)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)

        if format_type == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

        logger.addHandler(handler)
        logger.propagate = False

    level_name = (level or ("INFO" if verbose else "WARNING")).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(log_level)

    return logger
