"""Logger module."""

import logging

from programhub.configs import (
    PROJECT_NAME,
    LOG_FILE_PATH,
    LOG_FILE_LEVEL,
    LOG_STREAM_LEVEL,
)


class ProgramHubLogger(object):
    """Process-wide logger. Every instantiation returns the same configured ``logging.Logger``."""

    _instance = None

    @classmethod
    def _build_logger(cls):
        logger = logging.getLogger(PROJECT_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        formatter = logging.Formatter("[%(name)s][%(levelname)s][%(asctime)s][%(module)s] %(message)s")

        if LOG_STREAM_LEVEL != "DISABLE":
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(getattr(logging, LOG_STREAM_LEVEL))
            stream_handler.setFormatter(formatter)
            logger.addHandler(stream_handler)

        if LOG_FILE_LEVEL != "DISABLE":
            file_handler = logging.FileHandler(LOG_FILE_PATH, delay=True, mode="a+")
            file_handler.setLevel(getattr(logging, LOG_FILE_LEVEL))
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        if not logger.handlers:
            logger.addHandler(logging.NullHandler())

        return logger

    def __new__(cls, *args, **kwargs):
        """Return the shared logger, building it on first use."""
        if cls._instance is None:
            cls._instance = cls._build_logger()
        return cls._instance
