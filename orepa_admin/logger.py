import logging
import os
import sys

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'

def setup_logger(name="OREPA", level=None):
    """
    Console logger for the operator commands. Level comes from LOG_LEVEL
    (INFO when unset or unknown), e.g. LOG_LEVEL=DEBUG for a noisy run.
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    logger = logging.getLogger(name)
    level_no = logging.getLevelName(level.upper())
    logger.setLevel(level_no if isinstance(level_no, int) else logging.INFO)

    # one handler per logger, even when called again
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(handler)

    return logger

log = setup_logger()
