from __future__ import annotations

import logging
import threading
from pathlib import Path

from tfrun.client import TfeClient
from tfrun.configuration import load_action_config
from tfrun.contracts import ActionConfig, ActionResult, RemoteAPIClient, RunRequest, WorkspaceRef
from tfrun.contracts.action_config import DEFAULT_RUN_MESSAGE
from tfrun.orchestration.orchestrator import RunOrchestrator
from tfrun.orchestration.outputs import OutputTransformer
from tfrun.runtime.polling import Sleep


def run_action(
    config: ActionConfig,
    *,
    client: RemoteAPIClient | None = None,
    transformer: OutputTransformer | None = None,
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
    sleep: Sleep | None = None,
) -> ActionResult:
    """
    Create (unless skipped) and optionally await a run, then collect outputs.

    Outputs are not collected for destroy runs. The returned run id is empty
    when run creation was skipped.
    """
    log = logger or logging.getLogger("tfrun.action")
    orchestrator = build_orchestrator(
        config,
        client=client,
        transformer=transformer,
        logger=log,
        cancel_event=cancel_event,
        sleep=sleep,
    )

    run_id = ""
    if not config.skip_run:
        log.debug("Creating run in workspace: %s", config.workspace)
        if config.is_destroy:
            run_id = orchestrator.destroy(
                wait_for_completion=config.wait_for_run,
                message=config.message,
                auto_apply=config.auto_apply,
                target_addrs=tuple(config.target_addrs) or None,
            )
        else:
            run_id = orchestrator.build(
                build_run_request(config), wait_for_completion=config.wait_for_run
            )
        log.debug(
            "Run (%s) has been created %s",
            run_id,
            "and been applied successfully"
            if config.wait_for_run
            else "but has not yet been applied",
        )

    if not config.is_destroy:
        log.debug("Fetching outputs from workspace")
    outputs = orchestrator.fetch_outputs(is_destroy=config.is_destroy)
    return ActionResult(run_id=run_id, outputs=outputs)


def run_from_yaml(
    config_yaml: str | Path,
    *,
    client: RemoteAPIClient | None = None,
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
) -> ActionResult:
    config = load_action_config(config_yaml)
    return run_action(config, client=client, logger=logger, cancel_event=cancel_event)


def build_run_request(config: ActionConfig) -> RunRequest:
    return RunRequest(
        message=config.message or DEFAULT_RUN_MESSAGE,
        auto_apply=config.auto_apply,
        is_destroy=config.is_destroy,
        replace_addrs=tuple(config.replace_addrs) or None,
        target_addrs=tuple(config.target_addrs) or None,
    )


def build_orchestrator(
    config: ActionConfig,
    *,
    client: RemoteAPIClient | None = None,
    transformer: OutputTransformer | None = None,
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
    sleep: Sleep | None = None,
) -> RunOrchestrator:
    remote = client or TfeClient(
        config.hostname, config.token, timeout_s=config.request_timeout_s
    )
    return RunOrchestrator(
        WorkspaceRef(organization=config.organization, workspace_name=config.workspace),
        remote,
        run_policy=config.run_poll.to_policy(),
        output_policy=config.output_poll.to_policy(),
        transformer=transformer or build_transformer(config, logger=logger),
        logger=logger,
        cancel_event=cancel_event,
        sleep=sleep,
    )


def build_transformer(
    config: ActionConfig, *, logger: logging.Logger | None = None
) -> OutputTransformer:
    return OutputTransformer(
        rename=config.output_rename,
        static_outputs=config.static_outputs,
        logger=logger.getChild("outputs") if logger else None,
    )
