from __future__ import annotations

import logging
import threading

from tfrun.contracts.polling import DEFAULT_RUN_POLL, PollPolicy
from tfrun.contracts.remote_api import RemoteAPIClient
from tfrun.contracts.run_request import RunID, RunRequest, RunStatus, classify_status
from tfrun.errors import RunFailure, SubmissionError, TransportError
from tfrun.runtime.polling import Sleep, poll_until


class RunLifecycleController:
    """
    Submits runs and polls them until they reach a terminal status.

    Terminal statuses are split into a success set and a failure set; every
    other status counts as in progress and is polled again.
    """

    def __init__(
        self,
        client: RemoteAPIClient,
        *,
        policy: PollPolicy = DEFAULT_RUN_POLL,
        logger: logging.Logger | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self._client = client
        self._policy = policy
        self._logger = logger or logging.getLogger("tfrun.run")
        self._sleep = sleep

    def create(self, request: RunRequest) -> RunID:
        if not request.workspace_id:
            raise SubmissionError("refusing to submit a run without a workspace id")

        try:
            run_id = self._client.create_run(request)
        except TransportError as exc:
            raise SubmissionError(
                f"failed to create run on workspace {request.workspace_id}: {exc}"
            ) from exc

        self._logger.info(
            "Created %s run %s on workspace %s",
            "destroy" if request.is_destroy else "apply",
            run_id,
            request.workspace_id,
        )
        return run_id

    def await_completion(
        self,
        run_id: RunID,
        policy: PollPolicy | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RunStatus:
        """Block until the run succeeds; raise RunFailure if it fails."""

        def check() -> RunStatus | None:
            status = self._client.read_run_status(run_id)
            outcome = classify_status(status)
            if outcome == "failure":
                raise RunFailure(run_id, status)
            if outcome == "success":
                return status
            self._logger.debug("Run %s is %s", run_id, status)
            return None

        status = poll_until(
            check,
            policy=policy or self._policy,
            describe=f"run {run_id} to complete",
            logger=self._logger,
            cancel_event=cancel_event,
            sleep=self._sleep,
        )
        self._logger.info("Run %s completed with status %s", run_id, status)
        return status
