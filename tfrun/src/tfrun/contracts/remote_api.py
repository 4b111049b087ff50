from __future__ import annotations

from typing import Protocol, runtime_checkable

from tfrun.contracts.outputs import OutputSet
from tfrun.contracts.run_request import RunRequest


@runtime_checkable
class RemoteAPIClient(Protocol):
    """
    Facade contract for the remote run API.

    Implementations raise `tfrun.errors.TransportError` on any non-2xx
    response or network failure.
    """

    def create_run(self, request: RunRequest) -> str:
        """Create a run and return its id."""
        ...

    def read_workspace_id(self, organization: str, workspace: str) -> str:
        """Return the id of a named workspace."""
        ...

    def read_run_status(self, run_id: str) -> str:
        """Return the current status string of a run."""
        ...

    def read_resources_processed(self, workspace_id: str) -> bool:
        """Return whether the current state version has been fully processed."""
        ...

    def read_state_version_outputs(self, workspace_id: str) -> OutputSet:
        """Return the outputs of the workspace's current state version."""
        ...
