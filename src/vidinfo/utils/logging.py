"""Logging utilities."""

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False):
    """Send log records to stdout; DEBUG when verbose, INFO otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def log_error(msg: str, exc: Exception | None = None, log_file: Optional[Path] = None):
    """Append an error and its traceback to a file for debugging."""
    if log_file is None:
        log_file = Path.home() / "vidinfo_error.log"
    try:
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(f"{msg}\n")
            if exc:
                f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
            f.write("-" * 50 + "\n")
    except OSError as e:
        logging.getLogger(__name__).warning(f"Could not write error log {log_file}: {e}")
