import sys
from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logger(verbose: bool = False, sink=None):
    """
    Routes manifest-index logging to a single sink, stderr by default so that
    query results printed on stdout stay parseable.
    """
    level = "DEBUG" if verbose else "INFO"
    logger.remove()
    logger.add(
        sink or sys.stderr,
        colorize=sink is None,
        format=LOG_FORMAT,
        level=level,
    )
    return logger
