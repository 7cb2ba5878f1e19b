import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(module_name: str, level: int = logging.INFO, log_dir: Optional[str] = "logs") -> Optional[str]:
    """
    Send records at `level` and above to stderr, and errors to a timestamped
    file under `log_dir`. Stdout is left alone for parse results.

    Args:
        module_name (str): Prefix of the log file name.
        level (int): Threshold for the console.
        log_dir (Optional[str]): Directory for the error log, or None for no file.

    Returns:
        Optional[str]: Path of the error log, or None when no file is kept.
    """
    handlers: List[logging.Handler] = []
    log_file = None
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"{module_name}_{timestamp}.log")
        # the file only appears once an error is logged
        file_handler = logging.FileHandler(log_file, delay=True)
        file_handler.setLevel(logging.ERROR)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    logging.basicConfig(level=min(level, logging.ERROR), format=LOG_FORMAT, handlers=handlers)
    return log_file
