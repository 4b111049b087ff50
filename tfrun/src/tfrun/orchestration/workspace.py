from __future__ import annotations

import logging

from tfrun.contracts.remote_api import RemoteAPIClient
from tfrun.contracts.workspace import WorkspaceID, WorkspaceRef
from tfrun.errors import ResolutionError, TransportError


class WorkspaceResolver:
    """Turns an organization/workspace-name pair into the platform's workspace id."""

    def __init__(self, client: RemoteAPIClient, *, logger: logging.Logger | None = None) -> None:
        self._client = client
        self._logger = logger or logging.getLogger("tfrun.workspace")

    def resolve(self, organization: str, workspace_name: str) -> WorkspaceID:
        if not organization or not workspace_name:
            raise ResolutionError(
                "failed to resolve workspace: organization and workspace name must be non-empty"
            )

        try:
            workspace_id = self._client.read_workspace_id(organization, workspace_name)
        except TransportError as exc:
            raise ResolutionError(
                f"failed to resolve workspace {organization}/{workspace_name}: {exc}"
            ) from exc

        if not workspace_id:
            raise ResolutionError(
                f"failed to resolve workspace {organization}/{workspace_name}: empty id returned"
            )
        self._logger.debug(
            "Resolved workspace %s/%s to %s", organization, workspace_name, workspace_id
        )
        return workspace_id

    def resolve_ref(self, ref: WorkspaceRef) -> WorkspaceID:
        return self.resolve(ref.organization, ref.workspace_name)
