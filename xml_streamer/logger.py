"""
Logging configuration for the XML string streamer.
"""

import logging
import sys
from typing import Optional


def setup_logger(
    name: str = "xml_streamer",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path for logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Handlers are attached once; later calls only adjust the level
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Console handler goes to stderr so extracted nodes can be piped from stdout
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "xml_streamer.parser") propagate to the package logger,
    so a single setup_logger() call controls every stage.

    Args:
        module_name: Name of the module (e.g., 'parser', 'streams')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"xml_streamer.{module_name}")
