"""structlog setup."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: str = "warning") -> None:
    """Configure structlog to drop events below ``level``."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
    )
