"""Logging setup for the tokencount CLI. Diagnostics always go to stderr."""
import logging
import sys

LOGGER_NAME = "tokencount"


def level_for(quiet: bool, verbosity: int) -> int:
    if quiet:
        return logging.CRITICAL + 1
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(quiet: bool = False, verbosity: int = 0) -> logging.Logger:
    """
    Configures the package logger with a single stderr handler.
    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = level_for(quiet, verbosity)
    logger.setLevel(level)

    for old in list(logger.handlers):
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    return logger
