from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from tfrun.api import build_run_request, run_action, run_from_yaml
from tfrun.client.fakes import FakeRemoteAPIClient
from tfrun.contracts import ActionConfig
from tfrun.contracts.action_config import DEFAULT_RUN_MESSAGE
from tfrun.errors import OutputsUnavailableError, RunFailure
from tfrun.orchestration.orchestrator import DEFAULT_DESTROY_MESSAGE
from tfrun.testkit.payloads import DEFAULT_RUN_ID, sample_outputs


def _config(**overrides) -> ActionConfig:
    payload = {"organization": "hashicorp", "workspace": "foobar", "token": "foobar"}
    payload.update(overrides)
    return ActionConfig.model_validate(payload)


def _no_sleep(_seconds: float) -> None:
    return None


def test_run_action_builds_waits_and_collects_outputs():
    client = FakeRemoteAPIClient(
        run_statuses=["planning", "applying", "applied"],
        resources_processed=[False, True],
        outputs=sample_outputs(),
    )

    result = run_action(_config(), client=client, sleep=_no_sleep)

    assert result.run_id == DEFAULT_RUN_ID
    assert result.outputs is not None
    assert result.outputs.values["foobar"] == '["some","arr","val"]'
    assert result.outputs.sensitive_names == frozenset({"bar"})
    assert client.call_names().count("read_run_status") == 3


def test_run_action_skip_run_only_reads_outputs():
    client = FakeRemoteAPIClient(outputs=sample_outputs())

    result = run_action(_config(skip_run=True), client=client, sleep=_no_sleep)

    assert result.run_id == ""
    assert result.outputs is not None
    assert "create_run" not in client.call_names()


def test_run_action_destroy_omits_outputs():
    client = FakeRemoteAPIClient(outputs=sample_outputs())

    result = run_action(_config(is_destroy=True), client=client, sleep=_no_sleep)

    assert result.run_id == DEFAULT_RUN_ID
    assert result.outputs is None
    assert client.created_runs[0].is_destroy is True
    assert "read_state_version_outputs" not in client.call_names()


def test_run_action_without_wait_does_not_poll_run():
    client = FakeRemoteAPIClient(run_statuses=["planning"], outputs=sample_outputs())

    run_action(_config(wait_for_run=False), client=client, sleep=_no_sleep)

    assert "read_run_status" not in client.call_names()


def test_run_action_surfaces_run_failure():
    client = FakeRemoteAPIClient(run_statuses=["errored"], outputs=sample_outputs())

    with pytest.raises(RunFailure, match="exited unexpectedly with status: errored"):
        run_action(_config(), client=client, sleep=_no_sleep)
    assert "read_state_version_outputs" not in client.call_names()


def test_run_action_surfaces_empty_outputs():
    client = FakeRemoteAPIClient(outputs=())

    with pytest.raises(OutputsUnavailableError):
        run_action(_config(), client=client, sleep=_no_sleep)


def test_build_run_request_maps_address_lists():
    request = build_run_request(
        _config(message="m", replace_addrs=["a.b"], auto_apply=False)
    )

    assert request.message == "m"
    assert request.auto_apply is False
    assert request.replace_addrs == ("a.b",)
    assert request.target_addrs is None
    assert request.workspace_id == ""


def test_run_from_yaml_uses_injected_client(tmp_path: Path):
    config_yaml = tmp_path / "action.yaml"
    config_yaml.write_text(
        yaml.safe_dump(
            {
                "organization": "hashicorp",
                "workspace": "foobar",
                "token": "foobar",
                "wait_for_run": False,
            }
        ),
        encoding="utf-8",
    )
    client = FakeRemoteAPIClient(outputs=sample_outputs())

    result = run_from_yaml(config_yaml, client=client)

    assert result.run_id == DEFAULT_RUN_ID
    assert result.outputs.values["foo"] == "example-output"


def test_run_action_applies_configured_rename_and_static_outputs():
    client = FakeRemoteAPIClient(outputs=sample_outputs())
    config = _config(
        output_rename={"bar": "db_password"},
        static_outputs={"environment": "staging", "foo": "pinned"},
    )

    result = run_action(config, client=client, sleep=_no_sleep)

    assert result.outputs.values == {
        "foo": "pinned",
        "db_password": "some-sensitive-output",
        "foobar": '["some","arr","val"]',
        "environment": "staging",
    }
    assert result.outputs.sensitive_names == frozenset({"db_password"})


def test_run_action_destroy_uses_destroy_defaults_and_targets():
    client = FakeRemoteAPIClient()

    run_action(
        _config(is_destroy=True, auto_apply=False, target_addrs=["module.a"]),
        client=client,
        sleep=_no_sleep,
    )

    created = client.created_runs[0]
    assert created.is_destroy is True
    assert created.auto_apply is False
    assert created.message == DEFAULT_DESTROY_MESSAGE
    assert created.target_addrs == ("module.a",)
    assert created.replace_addrs is None


def test_run_action_uses_default_message_for_apply():
    client = FakeRemoteAPIClient(outputs=sample_outputs())

    run_action(_config(), client=client, sleep=_no_sleep)

    assert client.created_runs[0].message == DEFAULT_RUN_MESSAGE
