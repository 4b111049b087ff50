from __future__ import annotations

import threading

import pytest

from tfrun.client.fakes import FakeRemoteAPIClient
from tfrun.contracts import PollPolicy, RunRequest, WorkspaceRef
from tfrun.errors import OutputsUnavailableError, PollCancelledError, ResolutionError, RunFailure
from tfrun.orchestration.orchestrator import RunOrchestrator
from tfrun.orchestration.outputs import OutputTransformer
from tfrun.testkit.clock import FakeClock
from tfrun.testkit.payloads import DEFAULT_RUN_ID, DEFAULT_WORKSPACE_ID, sample_outputs


class _TimedRunClient(FakeRemoteAPIClient):
    """Reports `applying` until `switch_at` seconds have passed, then `final_status`."""

    def __init__(self, clock: FakeClock, *, switch_at: float, final_status: str) -> None:
        super().__init__(outputs=sample_outputs())
        self._clock = clock
        self._switch_at = switch_at
        self._final_status = final_status

    def read_run_status(self, run_id: str) -> str:
        super().read_run_status(run_id)
        if self._clock() >= self._switch_at:
            return self._final_status
        return "applying"


def _orchestrator(client, clock=None, **kwargs) -> RunOrchestrator:
    clock = clock or FakeClock()
    return RunOrchestrator(
        WorkspaceRef("hashicorp", "foobar"),
        client,
        sleep=clock.sleep,
        **kwargs,
    )


def test_build_without_waiting_returns_after_creation():
    client = FakeRemoteAPIClient(run_statuses=["planning"])

    run_id = _orchestrator(client).build(RunRequest(message="Foobar"), wait_for_completion=False)

    assert run_id == DEFAULT_RUN_ID
    assert client.call_names() == ["read_workspace_id", "create_run"]
    assert client.created_runs[0].workspace_id == DEFAULT_WORKSPACE_ID


def test_build_waits_for_run_to_apply():
    clock = FakeClock()
    client = _TimedRunClient(clock, switch_at=5.0, final_status="applied")

    run_id = _orchestrator(client, clock, run_policy=PollPolicy(interval_s=3.0)).build(
        RunRequest(message="Foobar"), wait_for_completion=True
    )

    assert run_id == DEFAULT_RUN_ID
    assert client.call_names().count("read_run_status") >= 2
    assert clock() >= 5.0


def test_build_rejects_when_run_errors():
    clock = FakeClock()
    client = _TimedRunClient(clock, switch_at=5.0, final_status="errored")

    with pytest.raises(RunFailure, match="exited unexpectedly with status: errored"):
        _orchestrator(client, clock, run_policy=PollPolicy(interval_s=3.0)).build(
            RunRequest(message="Foobar"), wait_for_completion=True
        )


def test_build_fails_fast_when_workspace_cannot_be_resolved():
    client = FakeRemoteAPIClient(workspaces={})

    with pytest.raises(ResolutionError):
        _orchestrator(client).build(RunRequest(message="Foobar"), wait_for_completion=True)
    assert client.created_runs == []


def test_build_forwards_address_overrides():
    client = FakeRemoteAPIClient()
    request = RunRequest(
        message="Foobar",
        replace_addrs=["aws_instance.a"],
        target_addrs=["module.b", "module.c"],
    )

    _orchestrator(client).build(request, wait_for_completion=False)

    created = client.created_runs[0]
    assert created.replace_addrs == ("aws_instance.a",)
    assert created.target_addrs == ("module.b", "module.c")


def test_destroy_submits_auto_applied_destroy_run():
    client = FakeRemoteAPIClient(run_statuses=["applied"])

    run_id = _orchestrator(client).destroy(wait_for_completion=True)

    assert run_id == DEFAULT_RUN_ID
    created = client.created_runs[0]
    assert created.is_destroy is True
    assert created.auto_apply is True
    assert created.message


def test_fetch_outputs_waits_for_processing_then_transforms():
    client = FakeRemoteAPIClient(
        resources_processed=[False, False, True],
        outputs=sample_outputs(),
    )

    outputs = _orchestrator(client).fetch_outputs()

    assert outputs is not None
    assert outputs.values == {
        "foo": "example-output",
        "bar": "some-sensitive-output",
        "foobar": '["some","arr","val"]',
    }
    assert outputs.sensitive_names == frozenset({"bar"})
    assert client.call_names() == [
        "read_workspace_id",
        "read_resources_processed",
        "read_resources_processed",
        "read_resources_processed",
        "read_state_version_outputs",
    ]


def test_fetch_outputs_skips_destroy_runs():
    client = FakeRemoteAPIClient(outputs=sample_outputs())

    assert _orchestrator(client).fetch_outputs(is_destroy=True) is None
    assert client.calls == []


def test_fetch_outputs_reports_empty_snapshot():
    client = FakeRemoteAPIClient(outputs=())

    with pytest.raises(OutputsUnavailableError, match=DEFAULT_WORKSPACE_ID):
        _orchestrator(client).fetch_outputs()


def test_fetch_outputs_uses_custom_transformer():
    client = FakeRemoteAPIClient(outputs=sample_outputs())
    transformer = OutputTransformer(rename={"foo": "renamed"})

    outputs = _orchestrator(client, transformer=transformer).fetch_outputs()

    assert "renamed" in outputs.values
    assert "foo" not in outputs.values


def test_cancel_event_aborts_run_wait():
    client = FakeRemoteAPIClient(run_statuses=["planning"])
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(PollCancelledError):
        _orchestrator(client, cancel_event=cancel).build(
            RunRequest(message="Foobar"), wait_for_completion=True
        )
    assert "read_run_status" not in client.call_names()
