from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import requests

from tfrun.contracts.outputs import Output, OutputSet
from tfrun.contracts.run_request import RunRequest
from tfrun.errors import TransportError

_JSON_API = "application/vnd.api+json"


class TfeClient:
    """
    requests-backed implementation of the RemoteAPIClient facade for the
    Terraform Cloud / Enterprise v2 API.
    """

    def __init__(
        self,
        hostname: str,
        token: str,
        *,
        timeout_s: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """Create a client bound to one host and bearer token."""
        if not hostname:
            raise ValueError("hostname must be a non-empty string")
        self._base_url = f"https://{hostname}/api/v2/"
        self._timeout_s = timeout_s
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": _JSON_API,
                "Content-Type": _JSON_API,
            }
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def create_run(self, request: RunRequest) -> str:
        """Create a run and return its id."""
        attributes: dict[str, Any] = {
            "message": request.message,
            "auto-apply": request.auto_apply,
            "is-destroy": request.is_destroy,
        }
        if request.replace_addrs:
            attributes["replace-addrs"] = list(request.replace_addrs)
        if request.target_addrs:
            attributes["target-addrs"] = list(request.target_addrs)

        payload = {
            "data": {
                "attributes": attributes,
                "type": "runs",
                "relationships": {
                    "workspace": {
                        "data": {"type": "workspaces", "id": request.workspace_id},
                    },
                },
            },
        }
        body = self._request(
            "POST",
            "runs",
            payload=payload,
            failure=f"Failed to create run on workspace {request.workspace_id}",
            operation="create_run",
            identifier=request.workspace_id,
        )
        return _extract(body, ("data", "id"), operation="create_run")

    def read_workspace_id(self, organization: str, workspace: str) -> str:
        """Return the id of a named workspace."""
        path = f"organizations/{_escape(organization)}/workspaces/{_escape(workspace)}"
        identifier = f"{organization}/{workspace}"
        body = self._request(
            "GET",
            path,
            failure=f"Failed to read workspace {identifier}",
            operation="read_workspace_id",
            identifier=identifier,
        )
        return _extract(body, ("data", "id"), operation="read_workspace_id")

    def read_run_status(self, run_id: str) -> str:
        """Return the current status string of a run."""
        body = self._request(
            "GET",
            f"runs/{_escape(run_id)}",
            failure=f"Failed to read run status {run_id}",
            operation="read_run_status",
            identifier=run_id,
        )
        return _extract(body, ("data", "attributes", "status"), operation="read_run_status")

    def read_resources_processed(self, workspace_id: str) -> bool:
        """Return whether the current state version has been fully processed."""
        body = self._read_current_state_version(
            workspace_id,
            failure="Failed to read resources processed",
            operation="read_resources_processed",
        )
        value = _extract(
            body,
            ("data", "attributes", "resources-processed"),
            operation="read_resources_processed",
        )
        return bool(value)

    def read_state_version_outputs(self, workspace_id: str) -> OutputSet:
        """Return the outputs of the workspace's current state version."""
        body = self._read_current_state_version(
            workspace_id,
            params={"include": "outputs"},
            failure=(
                f"Failed to read latest state version outputs in workspace {workspace_id}"
            ),
            operation="read_state_version_outputs",
        )
        included = body.get("included") or []
        try:
            return tuple(Output.from_attributes(item["attributes"]) for item in included)
        except (KeyError, TypeError) as exc:
            raise TransportError(
                f"Unexpected state version output payload in workspace {workspace_id}: {exc!r}",
                operation="read_state_version_outputs",
                identifier=workspace_id,
            ) from exc

    def _read_current_state_version(
        self,
        workspace_id: str,
        *,
        failure: str,
        operation: str,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return self._request(
            "GET",
            f"workspaces/{_escape(workspace_id)}/current-state-version",
            params=params,
            failure=failure,
            operation=operation,
            identifier=workspace_id,
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        operation: str,
        identifier: str,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(
                method,
                url,
                params=dict(params) if params else None,
                json=payload,
                timeout=self._timeout_s,
            )
            resp.raise_for_status()
            body = resp.json()
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise TransportError(
                f"{failure}: {exc}",
                operation=operation,
                identifier=identifier,
                status_code=status_code,
            ) from exc
        except requests.Timeout as exc:
            raise TransportError(
                f"{failure}: request timed out after {self._timeout_s}s",
                operation=operation,
                identifier=identifier,
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"{failure}: {exc}",
                operation=operation,
                identifier=identifier,
            ) from exc

        if not isinstance(body, dict):
            raise TransportError(
                f"{failure}: expected a JSON object, got {type(body).__name__}",
                operation=operation,
                identifier=identifier,
            )
        return body


def _escape(segment: str) -> str:
    return quote(segment, safe="")


def _extract(body: Mapping[str, Any], keys: tuple[str, ...], *, operation: str) -> Any:
    cursor: Any = body
    for key in keys:
        if not isinstance(cursor, Mapping) or key not in cursor:
            raise TransportError(
                f"Unexpected response for {operation}: missing '{'.'.join(keys)}'",
                operation=operation,
            )
        cursor = cursor[key]
    return cursor
