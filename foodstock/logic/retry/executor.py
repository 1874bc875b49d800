"""Shared error/loading state and bounded retry for every screen controller.

Controllers subclass OperationExecutor and run their store calls through
``execute_with_retry``. Outcomes are reported through the ``on_success`` callback
or the observable ``error`` attribute; nothing is returned to the caller.

All state writes happen on the event-loop thread. Store I/O awaited inside an
operation runs on worker threads, so callbacks never observe torn state.
"""
from __future__ import annotations
import asyncio
import inspect
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from foodstock.domain.Errors import AppError
from foodstock.logic.retry.policy import classify, is_retriable
from foodstock.utilities import config, validators
from foodstock.utilities.logger import category_logger

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
SuccessCallback = Callable[[T], Any]
RetryPredicate = Callable[[BaseException], bool]


class OperationExecutor:
    def __init__(self, category: Optional[str] = None, *,
                 max_retry_attempts: int = config.MAX_RETRY_ATTEMPTS,
                 retry_base_delay: float = config.RETRY_BASE_DELAY,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
                 clock: Optional[Callable[[], datetime]] = None):
        self.logger = category_logger(category or type(self).__name__)
        self.max_retry_attempts = max_retry_attempts
        self.retry_base_delay = retry_base_delay
        self.retry_count = 0
        self._sleep = sleep
        self._clock = clock or datetime.now
        self._error: Optional[AppError] = None
        self._is_loading = False

    # --- Observable state ------------------------------------------------------
    @property
    def error(self) -> Optional[AppError]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def _set_loading(self, loading: bool) -> None:
        self._is_loading = loading
        self.logger.debug("Loading state changed: %s", loading)

    # --- Error handling --------------------------------------------------------
    def handle_error(self, error: BaseException) -> None:
        app_error = classify(error)
        self.logger.error("Erreur: %s", app_error.description)
        self._error = app_error
        self._track_error(error)

    def clear_error(self) -> None:
        self._error = None
        self.retry_count = 0

    def _track_error(self, error: BaseException) -> None:
        self.logger.debug("Error tracked: %s", type(error).__name__)

    # --- Operations ------------------------------------------------------------
    async def execute_with_retry(self, operation: Operation, on_success: SuccessCallback,
                                 should_retry: RetryPredicate = is_retriable) -> None:
        """Run ``operation`` up to ``max_retry_attempts + 1`` times with exponential backoff.

        Exactly one of two things happens: ``on_success`` is called with the result,
        or ``error`` is set to the classified terminal error.
        """
        self._set_loading(True)
        try:
            for attempt in range(self.max_retry_attempts + 1):
                try:
                    result = await operation()
                except Exception as error:
                    if should_retry(error) and attempt < self.max_retry_attempts:
                        delay = self.retry_base_delay * (2 ** attempt)
                        self.logger.warning("Retry %d/%d after error: %s (waiting %.1fs)",
                                            attempt + 1, self.max_retry_attempts, error, delay)
                        await self._sleep(delay)
                        continue
                    self.retry_count = attempt
                    self.handle_error(error)
                    return

                try:
                    outcome = on_success(result)
                    self.clear_error()
                    # async follow-ups (e.g. reload after delete) may set their own error
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception as error:
                    # callback failures are terminal, the operation already succeeded
                    self.handle_error(error)
                return
        finally:
            self._set_loading(False)

    async def perform_operation(self, operation: Operation,
                                on_success: Optional[SuccessCallback] = None,
                                on_error: Optional[Callable[[AppError], Any]] = None) -> None:
        """Single attempt, ignored while another operation holds the loading flag."""
        if self._is_loading:
            self.logger.debug("Operation already in progress, ignored")
            return

        self._set_loading(True)
        try:
            result = await operation()
        except Exception as error:
            self.handle_error(error)
            if on_error is not None:
                on_error(self._error)
        else:
            try:
                if on_success is not None:
                    on_success(result)
                self.clear_error()
            except Exception as error:
                self.handle_error(error)
        finally:
            self._set_loading(False)

    # --- Validation helpers ----------------------------------------------------
    def validate_not_empty(self, value: Optional[str], field_name: str) -> None:
        validators.validate_not_empty(value, field_name)

    def validate_positive_quantity(self, quantity: float) -> None:
        validators.validate_positive_quantity(quantity)

    def validate_future_date(self, value: datetime, field_name: str) -> None:
        validators.validate_future_date(value, field_name, now=self._clock())
