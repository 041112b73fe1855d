import sys
from loguru import logger
from .config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level> {extra}"
)


def setup_logging():
    """Replace loguru's default sink with one driven by settings.

    LOG_JSON=true serializes every record (including keyword extras) as one
    JSON object per line, which is what the hosted log collectors expect.
    """
    logger.remove()
    if settings.log_json:
        logger.add(sys.stderr, level=settings.log_level.upper(), serialize=True)
    else:
        logger.add(sys.stderr, level=settings.log_level.upper(), format=LOG_FORMAT)

    logger.info("Logging configured", app=settings.app_name, env=settings.app_env)
    return logger
