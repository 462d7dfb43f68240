import logging
import os
import sys

NOISY_LOGGERS = ("urllib3", "requests")


def configure_logging(verbose: bool = False) -> int:
    """Send client logs to stderr so command output on stdout stays parseable."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv("TRACKER_CLIENT_LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stderr,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
    return level
