"""Bounded retry with a fixed wait-time schedule.

The RetryExecutor runs an async operation and retries it while a classifier
accepts the raised error. The schedule is an ordered sequence of wait times
in seconds; its length is the number of retries allowed after the first
attempt. Every retryable failure is reported to an optional observer before
the executor decides whether to wait or give up.

Two executors can be nested to apply different classifiers to the same
operation. The inner executor is invoked fresh by each outer attempt, so its
attempt counter starts over every time.

Example:
    executor = RetryExecutor()
    response = await executor.execute(
        lambda: client.put_item(TableName="users", Item={"id": "1"}),
        classify=is_transient_server_error,
        wait_times=(0.1, 0.5, 1.0),
    )

"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar, cast

from tenacity import (
    AsyncRetrying,
    Future,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from powered_dynamo.classifiers import ErrorClassifier, error_code
from powered_dynamo.exceptions import MaxRetriesReachedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryObserver = Callable[[BaseException], None]
Sleep = Callable[[float], Awaitable[None]]


def log_retryable_error(error: BaseException) -> None:
    """Retry observer that logs every retryable error as a warning."""
    logger.warning("Retryable DynamoDB error (%s): %s", error_code(error), error)


class _ScheduleWait:
    """tenacity wait strategy reading the wait before the next attempt from a schedule."""

    def __init__(self, wait_times: tuple[float, ...]) -> None:
        self._wait_times = wait_times

    def __call__(self, retry_state: RetryCallState) -> float:
        index = retry_state.attempt_number - 1
        if index < len(self._wait_times):
            return self._wait_times[index]
        # Past the end of the schedule the stop condition fires instead.
        return 0.0


def _failed_attempt_error(retry_state: RetryCallState) -> BaseException:
    """Return the error of the attempt that just failed."""
    outcome = cast(Future, retry_state.outcome)
    return cast(BaseException, outcome.exception())


def _raise_max_retries(retry_state: RetryCallState) -> None:
    last_error = _failed_attempt_error(retry_state)
    raise MaxRetriesReachedError(
        attempts=retry_state.attempt_number,
        last_error=last_error,
    ) from last_error


class RetryExecutor:
    """Retry async operations on classified errors following a wait-time schedule.

    The executor holds no schedule of its own: every call receives the wait
    times to use and takes a snapshot of them, so a schedule replaced while a
    call is in flight only affects later calls.

    Args:
        sleep: Coroutine function used to wait between attempts.

    """

    def __init__(self, *, sleep: Sleep = asyncio.sleep) -> None:
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        classify: ErrorClassifier,
        wait_times: Sequence[float],
        on_retryable_error: RetryObserver | None = None,
    ) -> T:
        """Run the operation, retrying while `classify` accepts its error.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt.
            classify: Predicate deciding whether an error is retryable.
            wait_times: Seconds to wait before each retry, in order.
            on_retryable_error: Called with the error on every retryable failure.

        Returns:
            The result of the first successful attempt.

        Raises:
            MaxRetriesReachedError: If the error is still retryable once every
                wait time has been used.

        Any error rejected by `classify` is raised unchanged.

        """
        schedule = tuple(wait_times)

        def notify(retry_state: RetryCallState) -> None:
            if on_retryable_error is not None:
                on_retryable_error(_failed_attempt_error(retry_state))

        retrying = AsyncRetrying(
            sleep=self._sleep,
            retry=retry_if_exception(classify),
            stop=stop_after_attempt(len(schedule) + 1),
            wait=_ScheduleWait(schedule),
            after=notify,
            retry_error_callback=_raise_max_retries,
        )

        # tenacity only awaits coroutine functions; plain lambdas returning
        # coroutines go through this wrapper.
        async def attempt() -> T:
            return await operation()

        return await retrying(attempt)


__all__ = [
    "RetryExecutor",
    "RetryObserver",
    "Sleep",
    "log_retryable_error",
]
