"""
Retry and circuit-breaker policies for calls to other services.

Both are plain objects so they can be composed explicitly around any
callable and swapped for fakes in tests:

    breaker = CircuitBreaker("catalog", ignore=(MenuItemNotFoundError,))
    retry = RetryPolicy(max_attempts=3, ignore=(MenuItemNotFoundError, CircuitOpenError))
    retry.call(breaker.call, fetch, product_id)

Design decisions:
- Count-based sliding window for the breaker (last N calls), not time-based
- "Ignored" exceptions are business outcomes: they are neither retried nor
  recorded by the breaker, they just propagate
- One lock per breaker; the breaker is shared by every request in the process
- Clock and sleep are injectable so tests don't wait for real
"""

import logging
import threading
import time
from collections import deque
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger("resilience")


class CircuitOpenError(Exception):
    """Raised instead of calling through while the circuit is open."""

    def __init__(self, name: str):
        super().__init__(f"Circuit breaker '{name}' is OPEN")
        self.name = name


class CircuitState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class RetryPolicy:
    """
    Bounded retry with exponential backoff.

    Attempt n (1-based) that fails with a retryable error is followed by a
    sleep of wait_seconds * multiplier ** (n - 1), capped at max_wait_seconds.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        wait_seconds: float = 0.5,
        multiplier: float = 2.0,
        max_wait_seconds: float = 5.0,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
        ignore: tuple[type[BaseException], ...] = (),
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.wait_seconds = wait_seconds
        self.multiplier = multiplier
        self.max_wait_seconds = max_wait_seconds
        self.retry_on = retry_on
        self.ignore = ignore
        self._sleep = sleep

    def backoff(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""
        return min(self.wait_seconds * self.multiplier ** (attempt - 1), self.max_wait_seconds)

    def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Call func, retrying retryable failures.

        Raises:
            The ignored exception immediately, or the last retryable exception
            once max_attempts is exhausted.
        """
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)
            except self.ignore:
                raise
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    logger.warning(f"Giving up after {attempt} attempts: {e}")
                    raise
                delay = self.backoff(attempt)
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed ({e}), retrying in {delay:.2f}s"
                )
                self._sleep(delay)
                attempt += 1


class CircuitBreaker:
    """
    Stops calling a failing dependency for a while.

    CLOSED: calls go through; outcomes land in a sliding window of the last
        `sliding_window_size` calls. Once at least `minimum_number_of_calls`
        are recorded and the failure rate reaches the threshold, the circuit OPENS.
    OPEN: calls fail fast with CircuitOpenError until
        `wait_duration_in_open_state` seconds have passed.
    HALF_OPEN: up to `permitted_calls_in_half_open_state` trial calls go
        through. If all succeed the circuit CLOSES, any failure re-OPENS it.

    A call is judged by the state it was admitted in. Outcomes of calls
    admitted before the latest transition are discarded.
    """

    def __init__(
        self,
        name: str,
        failure_rate_threshold: float = 50.0,
        sliding_window_size: int = 10,
        minimum_number_of_calls: int = 5,
        wait_duration_in_open_state: float = 30.0,
        permitted_calls_in_half_open_state: int = 2,
        ignore: tuple[type[BaseException], ...] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_rate_threshold = failure_rate_threshold
        self.sliding_window_size = sliding_window_size
        self.minimum_number_of_calls = min(minimum_number_of_calls, sliding_window_size)
        self.wait_duration_in_open_state = wait_duration_in_open_state
        self.permitted_calls_in_half_open_state = permitted_calls_in_half_open_state
        self.ignore = ignore
        self._clock = clock

        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        # True = failure, False = success
        self._window: deque[bool] = deque(maxlen=sliding_window_size)
        self._opened_at: Optional[float] = None
        self._half_open_in_flight = 0
        self._half_open_successes = 0
        self._not_permitted = 0
        # Bumped on every transition; outcomes from an older generation are dropped
        self._generation = 0

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._maybe_half_open()
            return self._state

    @property
    def failure_count(self) -> int:
        """Failures currently in the sliding window."""
        with self._lock:
            return sum(self._window)

    def failure_rate(self) -> float:
        """Failure percentage in the window, or -1.0 below the minimum call count."""
        with self._lock:
            return self._failure_rate()

    def metrics(self) -> dict[str, Any]:
        with self._lock:
            self._maybe_half_open()
            return {
                "name": self.name,
                "state": self._state.value,
                "buffered_calls": len(self._window),
                "failed_calls": sum(self._window),
                "failure_rate": self._failure_rate(),
                "not_permitted_calls": self._not_permitted,
            }

    def reset(self) -> None:
        with self._lock:
            self._transition(CircuitState.CLOSED)

    # =========================================================================
    # Guarded call
    # =========================================================================

    def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Call func if the circuit permits it and record the outcome.

        Raises:
            CircuitOpenError: If the circuit is open (func is not called)
        """
        generation = self._acquire_permission()
        try:
            result = func(*args, **kwargs)
        except self.ignore:
            self._release_ignored(generation)
            raise
        except Exception:
            self._on_failure(generation)
            raise
        self._on_success(generation)
        return result

    def _acquire_permission(self) -> int:
        """Admit a call and return the generation it was admitted in."""
        with self._lock:
            self._maybe_half_open()
            if self._state == CircuitState.OPEN:
                self._not_permitted += 1
                raise CircuitOpenError(self.name)
            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_in_flight >= self.permitted_calls_in_half_open_state:
                    self._not_permitted += 1
                    raise CircuitOpenError(self.name)
                self._half_open_in_flight += 1
            return self._generation

    def _release_ignored(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            if self._state == CircuitState.HALF_OPEN and self._half_open_in_flight > 0:
                self._half_open_in_flight -= 1

    def _on_success(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Circuit '{self.name}': dropping success from an earlier state")
                return
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_successes += 1
                if self._half_open_successes >= self.permitted_calls_in_half_open_state:
                    self._transition(CircuitState.CLOSED)
                return
            self._window.append(False)

    def _on_failure(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Circuit '{self.name}': dropping failure from an earlier state")
                return
            if self._state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN)
                return
            self._window.append(True)
            rate = self._failure_rate()
            if rate >= self.failure_rate_threshold:
                logger.warning(
                    f"Circuit '{self.name}' failure rate {rate:.1f}% >= "
                    f"{self.failure_rate_threshold:.1f}%"
                )
                self._transition(CircuitState.OPEN)

    # =========================================================================
    # State machine (caller holds the lock)
    # =========================================================================

    def _failure_rate(self) -> float:
        if len(self._window) < self.minimum_number_of_calls:
            return -1.0
        return 100.0 * sum(self._window) / len(self._window)

    def _maybe_half_open(self) -> None:
        if (
            self._state == CircuitState.OPEN
            and self._clock() - self._opened_at >= self.wait_duration_in_open_state
        ):
            self._transition(CircuitState.HALF_OPEN)

    def _transition(self, new_state: CircuitState) -> None:
        if new_state != self._state:
            logger.warning(f"Circuit '{self.name}': {self._state.value} -> {new_state.value}")
        self._state = new_state
        self._generation += 1
        self._half_open_in_flight = 0
        self._half_open_successes = 0
        if new_state == CircuitState.OPEN:
            self._opened_at = self._clock()
        else:
            self._opened_at = None
        if new_state == CircuitState.CLOSED:
            self._window.clear()
