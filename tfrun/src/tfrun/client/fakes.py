from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from tfrun.contracts.outputs import Output, OutputSet
from tfrun.contracts.run_request import RunRequest
from tfrun.errors import TransportError


@dataclass(frozen=True, slots=True)
class ApiCall:
    """Record of a remote API call for assertions in tests."""

    name: str
    kwargs: dict[str, Any]


class _Script:
    """Hands out scripted values in order, repeating the last one once exhausted."""

    def __init__(self, values: Iterable[Any]) -> None:
        self._values = list(values)
        if not self._values:
            raise ValueError("script must contain at least one value")
        self._index = 0

    @property
    def reads(self) -> int:
        return self._index

    def next(self) -> Any:
        value = self._values[min(self._index, len(self._values) - 1)]
        self._index += 1
        return value


class FakeRemoteAPIClient:
    """
    In-memory RemoteAPIClient for unit tests.

    Run statuses and the resources-processed flag are scripted sequences;
    each read consumes one entry and the final entry repeats forever.
    """

    def __init__(
        self,
        *,
        workspaces: Mapping[tuple[str, str], str] | None = None,
        run_id: str = "run-CZcmD7eagjhyX0vN",
        run_statuses: Iterable[str] = ("applied",),
        resources_processed: Iterable[bool] = (True,),
        outputs: Iterable[Output] = (),
    ) -> None:
        if workspaces is None:
            workspaces = {("hashicorp", "foobar"): "ws-noZcaGXsac6aZSJR"}
        self._workspaces = dict(workspaces)
        self._run_id = run_id
        self._run_statuses = _Script(run_statuses)
        self._resources_processed = _Script(resources_processed)
        self._outputs: OutputSet = tuple(outputs)
        self._failures: dict[str, Exception] = {}
        self._calls: list[ApiCall] = []
        self.created_runs: list[RunRequest] = []

    @property
    def calls(self) -> list[ApiCall]:
        """Return the recorded calls in order."""
        return list(self._calls)

    def call_names(self) -> list[str]:
        return [call.name for call in self._calls]

    def fail(self, operation: str, error: Exception | None = None) -> None:
        """Make every subsequent call to `operation` raise."""
        self._failures[operation] = error or TransportError(
            f"{operation} failed: 500 Server Error",
            operation=operation,
            status_code=500,
        )

    def create_run(self, request: RunRequest) -> str:
        """Record the request and return the configured run id."""
        self._record("create_run", request=request)
        self.created_runs.append(request)
        return self._run_id

    def read_workspace_id(self, organization: str, workspace: str) -> str:
        """Return the id registered for an organization/workspace pair."""
        self._record("read_workspace_id", organization=organization, workspace=workspace)
        try:
            return self._workspaces[(organization, workspace)]
        except KeyError as exc:
            raise TransportError(
                f"Failed to read workspace {organization}/{workspace}: 404 Not Found",
                operation="read_workspace_id",
                identifier=f"{organization}/{workspace}",
                status_code=404,
            ) from exc

    def read_run_status(self, run_id: str) -> str:
        """Return the next scripted run status."""
        self._record("read_run_status", run_id=run_id)
        return self._run_statuses.next()

    def read_resources_processed(self, workspace_id: str) -> bool:
        """Return the next scripted resources-processed flag."""
        self._record("read_resources_processed", workspace_id=workspace_id)
        return bool(self._resources_processed.next())

    def read_state_version_outputs(self, workspace_id: str) -> OutputSet:
        """Return the configured outputs."""
        self._record("read_state_version_outputs", workspace_id=workspace_id)
        return self._outputs

    def _record(self, name: str, **kwargs: Any) -> None:
        self._calls.append(ApiCall(name=name, kwargs=kwargs))
        failure = self._failures.get(name)
        if failure is not None:
            raise failure
