from __future__ import annotations


class TfRunError(RuntimeError):
    """Base class for failures raised while driving a remote run."""


class TransportError(TfRunError):
    """
    A remote API call failed (non-2xx response or network failure).

    Carries the failing operation and the identifier it was called with so the
    caller's logs show which phase broke.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        identifier: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.identifier = identifier
        self.status_code = status_code


class ResolutionError(TfRunError):
    pass


class SubmissionError(TfRunError):
    pass


class RunFailure(TfRunError):
    def __init__(self, run_id: str, status: str) -> None:
        super().__init__(f"run {run_id} exited unexpectedly with status: {status}")
        self.run_id = run_id
        self.status = status


class OutputsUnavailableError(TfRunError):
    pass


class PollTimeoutError(TfRunError):
    pass


class PollCancelledError(TfRunError):
    pass
