"""Runtime helpers for orchestration."""

from tfrun.runtime.polling import poll_until

__all__ = ["poll_until"]
