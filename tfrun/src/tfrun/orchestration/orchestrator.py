from __future__ import annotations

import logging
import threading

from tfrun.contracts.outputs import CallerOutputs
from tfrun.contracts.polling import DEFAULT_OUTPUT_POLL, DEFAULT_RUN_POLL, PollPolicy
from tfrun.contracts.remote_api import RemoteAPIClient
from tfrun.contracts.run_request import RunID, RunRequest
from tfrun.contracts.workspace import WorkspaceRef
from tfrun.orchestration.outputs import OutputTransformer
from tfrun.orchestration.readiness import OutputReadinessWaiter
from tfrun.orchestration.runs import RunLifecycleController
from tfrun.orchestration.workspace import WorkspaceResolver
from tfrun.runtime.polling import Sleep

DEFAULT_DESTROY_MESSAGE = "Destroy queued via terraform-cloud-run"


class RunOrchestrator:
    """
    Sequences workspace resolution, run submission, completion polling and
    output extraction for a single workspace.

    One orchestrator drives one run at a time; the client is used sequentially.
    Setting `cancel_event` aborts any wait in progress with PollCancelledError.
    """

    def __init__(
        self,
        workspace: WorkspaceRef,
        client: RemoteAPIClient,
        *,
        run_policy: PollPolicy = DEFAULT_RUN_POLL,
        output_policy: PollPolicy = DEFAULT_OUTPUT_POLL,
        transformer: OutputTransformer | None = None,
        logger: logging.Logger | None = None,
        cancel_event: threading.Event | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self._workspace = workspace
        self._logger = logger or logging.getLogger("tfrun.orchestrator")
        self._cancel_event = cancel_event
        self._resolver = WorkspaceResolver(client, logger=self._logger.getChild("workspace"))
        self._runs = RunLifecycleController(
            client,
            policy=run_policy,
            logger=self._logger.getChild("run"),
            sleep=sleep,
        )
        self._readiness = OutputReadinessWaiter(
            client,
            policy=output_policy,
            logger=self._logger.getChild("readiness"),
            sleep=sleep,
        )
        self._transformer = transformer or OutputTransformer(
            logger=self._logger.getChild("outputs")
        )
        self._client = client

    @property
    def workspace(self) -> WorkspaceRef:
        return self._workspace

    def build(self, request: RunRequest, *, wait_for_completion: bool) -> RunID:
        """Submit `request` against the workspace; optionally wait for it to finish."""
        workspace_id = self._resolver.resolve_ref(self._workspace)
        run_id = self._runs.create(request.with_workspace(workspace_id))

        if wait_for_completion:
            self._runs.await_completion(run_id, cancel_event=self._cancel_event)
        else:
            self._logger.info("Run %s created, not waiting for it to complete", run_id)
        return run_id

    def destroy(
        self,
        *,
        wait_for_completion: bool,
        message: str | None = None,
        auto_apply: bool = True,
        target_addrs: tuple[str, ...] | None = None,
    ) -> RunID:
        request = RunRequest(
            message=message or DEFAULT_DESTROY_MESSAGE,
            auto_apply=auto_apply,
            is_destroy=True,
            target_addrs=target_addrs,
        )
        return self.build(request, wait_for_completion=wait_for_completion)

    def fetch_outputs(self, *, is_destroy: bool = False) -> CallerOutputs | None:
        """
        Read and transform the outputs of the workspace's current state version.

        Destroy runs leave nothing to report, so `is_destroy=True` returns None
        without touching the remote API.
        """
        if is_destroy:
            self._logger.info(
                "Skipping outputs for destroy run in %s", self._workspace.short_name()
            )
            return None

        workspace_id = self._resolver.resolve_ref(self._workspace)
        self._readiness.await_ready(workspace_id, cancel_event=self._cancel_event)
        outputs = self._client.read_state_version_outputs(workspace_id)
        return self._transformer.transform(outputs, workspace_id=workspace_id)
