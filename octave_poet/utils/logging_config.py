# octave_poet/utils/logging_config.py

import logging
from typing import Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Union[int, str] = logging.INFO, fmt: str = DEFAULT_FORMAT, suppress_http: bool = True):
    """
    Configure logging for the octave pipeline.

    Args:
        level: Logging level, as a number or a name such as "DEBUG" (default: INFO)
        fmt: Log record format
        suppress_http: Whether to suppress HTTP request logs (default: True)
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if suppress_http:
        # HTTP and provider client chatter
        http_loggers = [
            "httpx",
            "httpcore",
            "openai",
            "anthropic",
            "groq",
        ]

        for logger_name in http_loggers:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

        verbose_loggers = [
            "httpx._client",
            "openai._base_client",
            "anthropic._base_client",
        ]

        for logger_name in verbose_loggers:
            logging.getLogger(logger_name).setLevel(logging.ERROR)

    logging.getLogger().setLevel(level)

    return logging.getLogger(__name__)
