#!/usr/bin/env python3

import logging
import os
import typing

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str,
    log_file: typing.Optional[str] = None,
    level: int = logging.INFO,
    format: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Setup a named logger writing to `log_file`, or to stderr when no file is given.
    Calling it again for the same name and destination does not duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for existing in logger.handlers:
        if log_file is None and type(existing) is logging.StreamHandler:
            return logger
        if log_file is not None and isinstance(existing, logging.FileHandler) \
            and existing.baseFilename == os.path.abspath(log_file):
            return logger
    handler = logging.FileHandler(log_file) if log_file is not None else logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format))
    logger.addHandler(handler)
    return logger
