"""Retry policy and error coercion.

``classify`` is the single place where a foreign exception becomes an AppError;
``is_retriable`` decides whether an error is transient enough to try again.
"""
from __future__ import annotations
import asyncio

from foodstock.domain.Errors import (
    AppError, DataError, DataErrorKind, NotificationError, NotificationErrorKind, UnknownError
)

__all__ = ["classify", "is_retriable", "RETRIABLE_NETWORK_ERRORS"]

# timed out / cannot connect to host / connection lost
RETRIABLE_NETWORK_ERRORS = (
    TimeoutError,
    asyncio.TimeoutError,  # distinct from TimeoutError before 3.11
    ConnectionRefusedError,
    ConnectionResetError,
    ConnectionAbortedError,
    BrokenPipeError,
)

_RETRIABLE_DATA = {DataErrorKind.FETCH_FAILED, DataErrorKind.SAVE_FAILED}
_RETRIABLE_NOTIFICATION = {NotificationErrorKind.SCHEDULING_FAILED}


def classify(error: BaseException) -> AppError:
    """Return ``error`` itself if it is an AppError, else wrap it as UnknownError."""
    if isinstance(error, AppError):
        return error
    return UnknownError(str(error) or type(error).__name__)


def is_retriable(error: BaseException) -> bool:
    if isinstance(error, DataError):
        return error.kind in _RETRIABLE_DATA
    if isinstance(error, NotificationError):
        return error.kind in _RETRIABLE_NOTIFICATION
    if isinstance(error, AppError):
        return False
    return isinstance(error, RETRIABLE_NETWORK_ERRORS)
