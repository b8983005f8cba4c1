"""
Logging configuration for the toolbox runtime.

This module sets up structured logging with JSON formatting for production
and human-readable formatting for development, including the tool and source
context attached to invocation records.
"""

import logging
import logging.config
import sys


def setup_logging(log_level: str = "INFO", debug: bool = False, json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        log_level: The log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: Whether to use the detailed human-readable format
        json_format: Emit one JSON object per record instead of text
    """
    if json_format:
        formatter = "json"
    elif debug:
        formatter = "detailed"
    else:
        formatter = "default"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "detailed": {
                "()": "toolbox.core.logging.StructuredFormatter",
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "[%(filename)s:%(lineno)d] - "
                    "[tool=%(tool_name)s] [source=%(source_name)s] - "
                    "%(message)s"
                )
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": (
                    "%(asctime)s %(name)s %(levelname)s %(filename)s "
                    "%(lineno)d %(message)s"
                )
            }
        },
        "handlers": {
            "console": {
                # stdout may carry a protocol stream
                "class": "logging.StreamHandler",
                "stream": sys.stderr,
                "formatter": formatter,
                "level": log_level
            }
        },
        "loggers": {
            "": {  # Root logger
                "level": log_level,
                "handlers": ["console"],
                "propagate": False
            },
            "toolbox": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)


class StructuredFormatter(logging.Formatter):
    """Formatter that fills in the structured fields missing from a record."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'tool_name'):
            record.tool_name = None
        if not hasattr(record, 'source_name'):
            record.source_name = None

        return super().format(record)
