from __future__ import annotations

import copy
from typing import Any

from tfrun.contracts.outputs import Output

DEFAULT_RUN_ID = "run-CZcmD7eagjhyX0vN"
DEFAULT_WORKSPACE_ID = "ws-noZcaGXsac6aZSJR"

_SAMPLE_OUTPUTS: list[dict[str, Any]] = [
    {"name": "foo", "sensitive": False, "type": "string", "value": "example-output"},
    {"name": "bar", "sensitive": True, "type": "string", "value": "some-sensitive-output"},
    {
        "name": "foobar",
        "sensitive": False,
        "type": "array",
        "value": ["some", "arr", "val"],
    },
]


def sample_outputs() -> tuple[Output, ...]:
    return tuple(Output.from_attributes(item) for item in _SAMPLE_OUTPUTS)


def read_workspace_payload(workspace_id: str = DEFAULT_WORKSPACE_ID) -> dict[str, Any]:
    return {
        "data": {
            "id": workspace_id,
            "type": "workspaces",
            "attributes": {"name": "foobar", "auto-apply": False},
        }
    }


def create_run_payload(run_id: str = DEFAULT_RUN_ID) -> dict[str, Any]:
    return {
        "data": {
            "id": run_id,
            "type": "runs",
            "attributes": {"status": "pending", "is-destroy": False},
        }
    }


def read_run_payload(status: str = "planning", run_id: str = DEFAULT_RUN_ID) -> dict[str, Any]:
    return {
        "data": {
            "id": run_id,
            "type": "runs",
            "attributes": {"status": status},
        }
    }


def state_version_payload(
    *,
    resources_processed: bool = True,
    include_outputs: bool = True,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "data": {
            "id": "sv-g4rqST72reoHMM5a",
            "type": "state-versions",
            "attributes": {"resources-processed": resources_processed, "serial": 9},
        }
    }
    if include_outputs:
        payload["included"] = [
            {
                "id": f"wsout-{index}",
                "type": "state-version-outputs",
                "attributes": copy.deepcopy(item),
            }
            for index, item in enumerate(_SAMPLE_OUTPUTS)
        ]
    return payload
