"""Utility modules for SCM Collector."""

from .logger import get_logger, log_exception, LoggerSetup
from .http import get_http_session, build_auth_headers
from .progress import (
    ProgressReporter,
    NullProgressReporter,
    ConsoleProgressReporter,
)

__all__ = [
    "get_logger",
    "log_exception",
    "LoggerSetup",
    "get_http_session",
    "build_auth_headers",
    "ProgressReporter",
    "NullProgressReporter",
    "ConsoleProgressReporter",
]
