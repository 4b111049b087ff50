from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_result,
    stop_after_delay,
    stop_never,
    stop_when_event_set,
    wait_exponential,
    wait_fixed,
)

from tfrun.contracts.polling import PollPolicy
from tfrun.errors import PollCancelledError, PollTimeoutError

T = TypeVar("T")
Sleep = Callable[[float], None]


def poll_until(
    check: Callable[[], T | None],
    *,
    policy: PollPolicy,
    describe: str,
    logger: logging.Logger,
    cancel_event: threading.Event | None = None,
    sleep: Sleep | None = None,
) -> T:
    """
    Call ``check`` until it returns something other than None and return that.

    Exceptions raised by ``check`` are not retried; they propagate unchanged.
    Raises PollTimeoutError once ``policy.timeout_s`` has elapsed and
    PollCancelledError when ``cancel_event`` is set. A set event is honoured
    before each attempt and interrupts the pause between attempts when no
    ``sleep`` is injected.
    """

    def attempt() -> T | None:
        if cancel_event is not None and cancel_event.is_set():
            raise PollCancelledError(f"Cancelled while waiting for {describe}")
        return check()

    def log_pause(retry_state: RetryCallState) -> None:
        logger.debug(
            "Waiting for %s, polling again in %.1fs (attempt %d)",
            describe,
            retry_state.next_action.sleep,
            retry_state.attempt_number,
        )

    retrying = Retrying(
        retry=retry_if_result(lambda result: result is None),
        wait=_wait_for(policy),
        stop=_stop_for(policy, cancel_event),
        sleep=_sleep_for(sleep, cancel_event),
        before_sleep=log_pause,
    )
    try:
        return retrying(attempt)
    except RetryError as e:
        if cancel_event is not None and cancel_event.is_set():
            raise PollCancelledError(f"Cancelled while waiting for {describe}") from e
        raise PollTimeoutError(
            f"Timed out after {policy.timeout_s}s waiting for {describe} "
            f"({e.last_attempt.attempt_number} attempts)"
        ) from e


def _wait_for(policy: PollPolicy):
    if policy.backoff_factor == 1.0:
        return wait_fixed(policy.interval_s)
    if policy.max_interval_s is None:
        return wait_exponential(multiplier=policy.interval_s, exp_base=policy.backoff_factor)
    return wait_exponential(
        multiplier=policy.interval_s,
        exp_base=policy.backoff_factor,
        max=policy.max_interval_s,
    )


def _stop_for(policy: PollPolicy, cancel_event: threading.Event | None):
    stop = stop_never if policy.timeout_s is None else stop_after_delay(policy.timeout_s)
    if cancel_event is not None:
        stop = stop | stop_when_event_set(cancel_event)
    return stop


def _sleep_for(sleep: Sleep | None, cancel_event: threading.Event | None) -> Sleep:
    if sleep is not None:
        return sleep
    if cancel_event is not None:
        return cancel_event.wait
    return time.sleep
