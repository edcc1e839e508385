"""Telemetry helpers.

This package emits structured request events for client operations.
"""

from .logger import RequestLogger, configure_logging

__all__ = ["RequestLogger", "configure_logging"]
