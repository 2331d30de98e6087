"""Logging configuration: brief console output + per-session rotating log file"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

KEEP_SESSION_LOGS = 5
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB


def _prune_session_logs(log_dir: Path, stem: str, keep: int):
    """Delete old session logs so that `keep` remain after the new one is created"""
    existing = sorted(log_dir.glob(f"{stem}_*.log"), reverse=True)  # Newest first
    for old_log in existing[keep - 1:]:
        try:
            old_log.unlink()
        except OSError:
            pass


def setup_logging(
    log_file: str = "logs/venue-search.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure root logging with two destinations:
    - Console: level + message (INFO by default)
    - File: timestamp, logger and line number (DEBUG by default)

    Each call starts a new session file named <stem>_<timestamp>.log next
    to log_file; only the newest 5 session files are kept.

    Args:
        log_file: Base log path (relative to working directory)
        console_level: Console logging level
        file_level: File logging level

    Returns:
        Path of the session log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _prune_session_logs(log_path.parent, log_path.stem, KEEP_SESSION_LOGS)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Handlers filter
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=MAX_LOG_BYTES,
        backupCount=10,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Access logs only go to the file
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info(f"Logging configured: console={logging.getLevelName(console_level)}, file={session_log} ({logging.getLevelName(file_level)})")
    return session_log
