import sys

from loguru import logger

from .config import settings

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level> | {extra}"
)


def setup_logging(level: str | None = None):
    """
    Configure the loguru sink used by the whole service.

    Keyword arguments passed to logger calls land in ``extra`` and are
    rendered at the end of each line, e.g.
    ``logger.info("Category suggested", index=2)``.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format=_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    return logger
