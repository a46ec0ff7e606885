"""Observability helpers for bytes-commerce.

Usage::

    from bytes_commerce.observability import configure_logging, get_logger

    configure_logging()
"""

from .logging import configure_logging, get_logger, provisioning_id_ctx, redact

__all__ = [
    "configure_logging",
    "get_logger",
    "provisioning_id_ctx",
    "redact",
]
