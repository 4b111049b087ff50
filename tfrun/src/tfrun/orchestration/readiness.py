from __future__ import annotations

import logging
import threading

from tfrun.contracts.polling import DEFAULT_OUTPUT_POLL, PollPolicy
from tfrun.contracts.remote_api import RemoteAPIClient
from tfrun.contracts.workspace import WorkspaceID
from tfrun.runtime.polling import Sleep, poll_until


class OutputReadinessWaiter:
    """
    Waits until the platform has processed the resources of the workspace's
    current state version.

    An apply can finish before the output summary is derived; reading outputs
    earlier returns a stale or partial set.
    """

    def __init__(
        self,
        client: RemoteAPIClient,
        *,
        policy: PollPolicy = DEFAULT_OUTPUT_POLL,
        logger: logging.Logger | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self._client = client
        self._policy = policy
        self._logger = logger or logging.getLogger("tfrun.readiness")
        self._sleep = sleep

    def await_ready(
        self,
        workspace_id: WorkspaceID,
        policy: PollPolicy | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        def check() -> bool | None:
            if self._client.read_resources_processed(workspace_id):
                return True
            return None

        poll_until(
            check,
            policy=policy or self._policy,
            describe=f"workspace {workspace_id} outputs to be ready",
            logger=self._logger,
            cancel_event=cancel_event,
            sleep=self._sleep,
        )
        self._logger.debug("Outputs of workspace %s are ready", workspace_id)
