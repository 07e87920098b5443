"""
Correlation IDs for operation tracing

Each orchestrator operation runs inside a CorrelationContext so that every
log line it emits, including those from concurrent asyncio tasks, carries
the same short ID.
"""

import contextvars
import logging
import uuid
from typing import Optional

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "cusd_correlation_id", default=None
)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the current context, if any"""
    return _correlation_id.get()


class CorrelationContext:
    """
    Context manager scoping a correlation ID.

    Usage:
        with CorrelationContext("mint") as cid:
            logger.info(f"[{cid}] Building mint batch")
    """

    def __init__(self, prefix: Optional[str] = None):
        cid = generate_correlation_id()
        self.correlation_id = f"{prefix}_{cid}" if prefix else cid
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _correlation_id.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)
            self._token = None


def log_with_correlation(
    logger: logging.Logger,
    level: int,
    message: str,
    operation_name: str,
    **extra,
) -> None:
    """
    Log "[cid] [operation] message" with the context fields attached as extras.

    Args:
        logger: Logger of the calling module
        level: Logging level
        message: Log message
        operation_name: Name of the running operation
        **extra: Additional structured fields
    """
    cid = get_correlation_id()
    prefix = f"[{cid}] " if cid else ""
    logger.log(
        level,
        f"{prefix}[{operation_name}] {message}",
        extra={"correlation_id": cid, "operation": operation_name, **extra},
    )
