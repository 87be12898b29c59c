# vsm_engine/application/log_setup.py
import sys
from loguru import logger
from vsm_engine.application.settings import Settings, get_settings

def setup_logging(settings: Settings | None = None, sink=sys.stdout) -> int:
    """Configure Loguru once, based on Settings.log_level / Settings.debug.

    Returns the handler id so callers can remove the sink again.
    """
    settings = settings or get_settings()
    level = settings.log_level or ("DEBUG" if settings.debug else "INFO")

    logger.remove()  # remove default handler(s) to avoid duplicates on reload
    return logger.add(
        sink,
        level=level.upper(),
        # training streams log from their own worker thread
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
               "<level>{level: <8}</level> | "
               "<magenta>{thread.name}</magenta> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
               "<level>{message}</level>",
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )
