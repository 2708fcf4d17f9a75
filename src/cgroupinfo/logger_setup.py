import sys

from loguru import logger


def setup_logger(level: str = "WARNING") -> None:
    """Send logs to stderr so reports on stdout stay clean."""
    logger_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>"
    )
    if level == "DEBUG":
        logger_format += " | {extra}"

    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=logger_format,
        diagnose=False,  # hide variable values in log backtrace
    )
