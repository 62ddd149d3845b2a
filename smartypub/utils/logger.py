"""
Handles configuration of logging for the main process and for
multiprocessing workers.
"""
import logging
import sys
import os
import io
from pathlib import Path
from datetime import datetime

# Define a consistent log directory
LOG_DIR = Path("./logs")
MAX_LOG_FILES = 20
CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"
FILE_LOG_FORMAT = (
    "%(asctime)s [%(process)d] %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
)


def _prune_old_logs(log_dir: Path, keep: int):
    """Removes the oldest smartypub_*.log files so that at most `keep` remain."""
    logs = sorted(
        [p for p in log_dir.glob("smartypub_*.log") if p.is_file()],
        key=os.path.getmtime,
    )
    files_to_remove = len(logs) - keep
    if files_to_remove > 0:
        for log_file in logs[:files_to_remove]:
            try:
                log_file.unlink()
            except OSError:
                pass  # Ignore errors if file is locked


def setup_main_logger(console_level=logging.ERROR, log_dir: Path | None = LOG_DIR):
    """
    Configures the "smartypub" logger for the main process.

    Console output goes to stdout at `console_level`. Unless `log_dir` is None,
    a new DEBUG-level log file is created for this run and old ones are rotated out.
    """
    logger = logging.getLogger("smartypub")
    logger.setLevel(logging.DEBUG)  # Capture all levels

    # Avoid adding duplicate handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_dir is None:
        return logger

    # --- File Handler (Rotation and New File) ---
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        _prune_old_logs(log_dir, MAX_LOG_FILES - 1)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        new_log_path = log_dir / f"smartypub_{timestamp}.log"

        file_handler = logging.FileHandler(new_log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

        logger.info(
            "Main logger initialized. Console level: %s, File level: DEBUG. Logging to: %s",
            logging.getLevelName(console_level),
            new_log_path,
        )
    except OSError:
        logger.error("Failed to set up file logging.", exc_info=True)

    return logger


def setup_worker_logger():
    """
    Configures a temporary, in-memory logger for a child process.

    Returns:
        tuple[io.StringIO, logging.Handler]:
            - The string buffer that will capture logs.
            - The handler attached to the logger.
    (Both must be closed by the caller)
    """
    log_stream = io.StringIO()

    handler = logging.StreamHandler(log_stream)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%H:%M:%S"))

    logger = logging.getLogger("smartypub")
    logger.handlers.clear()  # Remove any handlers inherited from parent
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    return log_stream, handler
