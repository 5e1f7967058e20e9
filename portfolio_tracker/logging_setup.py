from loguru import logger
import sys
import os

_configured = False


def setup_logging(log_dir: str = None, console_level: str = "INFO"):
    """Configure loguru sinks for the application"""
    global _configured
    if _configured:
        return logger

    log_dir = log_dir or os.getenv("LOG_DIR", "logs")

    # Create logs directory if it doesn't exist
    os.makedirs(log_dir, exist_ok=True)

    logger.remove()  # Remove default handler

    # Add console handler with INFO level
    logger.add(sys.stderr, level=console_level)

    # Add file handler with more verbosity for debugging
    logger.add(
        os.path.join(log_dir, "app_{time:YYYY-MM-DD}.log"),
        rotation="1 day",    # New file is created each day
        retention="1 week",  # Logs are kept for 1 week
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} - {message}",
        backtrace=True,
        diagnose=True
    )

    _configured = True
    return logger


def get_logger(name):
    """Get a logger with the specified name"""
    return logger.bind(name=name)
