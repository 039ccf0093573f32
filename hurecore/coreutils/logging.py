import logging
import os
from datetime import datetime

from hurecore.coreutils.env import LOG_DIR, LOG_LEVEL


def setup_logging(level=None, log_dir: str | None = None):
    """Setup basic logging configuration"""
    if level is None:
        level = getattr(logging, str(LOG_LEVEL).upper(), logging.INFO)
    log_dir = log_dir or LOG_DIR
    os.makedirs(log_dir, exist_ok=True)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[
            logging.FileHandler(
                os.path.join(
                    log_dir, f"hurecore_{datetime.now().strftime('%Y-%m-%d')}.log"
                )
            ),
            logging.StreamHandler(),
        ],
    )
    return logging.getLogger("hurecore")


def log_function_call(func_name: str, **kwargs):
    """Log a command invocation with the options that were set"""
    params = {k: v for k, v in kwargs.items() if v is not None}
    logging.getLogger("hurecore").info(f"Running {func_name} with {params}")
