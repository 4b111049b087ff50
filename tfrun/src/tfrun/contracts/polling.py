from __future__ import annotations

from dataclasses import dataclass

@dataclass(frozen=True, slots=True)
class PollPolicy:
    """
    How a remote condition is polled.

    `timeout_s=None` waits until the remote side reaches the condition.
    """

    interval_s: float
    max_interval_s: float | None = None
    backoff_factor: float = 1.0
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        if self.interval_s < 0:
            raise ValueError("interval_s must be >= 0")
        if self.backoff_factor < 1.0:
            raise ValueError("backoff_factor must be >= 1.0")
        if self.max_interval_s is not None and self.max_interval_s < self.interval_s:
            raise ValueError("max_interval_s must be >= interval_s")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0 when provided")


DEFAULT_RUN_POLL = PollPolicy(interval_s=3.0)
DEFAULT_OUTPUT_POLL = PollPolicy(interval_s=1.0)
