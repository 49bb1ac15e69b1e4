import logging
import sys

from chainderive.core.constants import LOGGER_NAME

# Define global variables to control logging
app_log_enabled = False  # For users


def current_logging_status() -> bool:
    """Let user see what the current logging status is."""
    return app_log_enabled


# Every module logger lives under the package logger, so one handler covers
# the detector, the materializer, the composer and the builtin groups
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.DEBUG)
handler = logging.StreamHandler(sys.stdout)
handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(message)s"))

### Functions to enable or disable logging in notebooks and scripts


def enable_app_logging():
    """
    Enables application logging by adding a handler.
    """
    global app_log_enabled
    if not app_log_enabled:
        app_log_enabled = True
        logger.addHandler(handler)


def disable_app_logging():
    """
    Disables logging by removing application logger handler.
    """
    global app_log_enabled
    if app_log_enabled:
        app_log_enabled = False
        logger.removeHandler(handler)
