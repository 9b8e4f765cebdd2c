"""Logging setup shared by the server and the controller client."""
import os
import sys
import logging
from typing import Optional

from .path_config import get_logs_dir

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", fmt: str = DEFAULT_FORMAT,
                  log_file: Optional[str] = None) -> logging.Logger:
    """Configure the root logger and return it.

    The stream handler is only added when the root logger has no handlers yet.
    ``log_file`` is attached either way, once per path; a relative name is
    placed in the logs directory.
    """
    root = logging.getLogger()
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt)

    if not root.handlers:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    if log_file:
        if not os.path.isabs(log_file):
            log_file = os.path.join(get_logs_dir(), log_file)
        log_file = os.path.abspath(log_file)
        already_attached = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == log_file
            for h in root.handlers
        )
        if not already_attached:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    # engineio logs every packet at INFO
    logging.getLogger("engineio").setLevel(logging.WARNING)
    return root
