from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Literal

RunID = str
RunStatus = str
StatusClass = Literal["success", "failure", "pending"]

SUCCESS_STATUSES: frozenset[RunStatus] = frozenset({"applied", "planned_and_finished"})
FAILURE_STATUSES: frozenset[RunStatus] = frozenset({"canceled", "errored", "discarded"})


def classify_status(status: RunStatus) -> StatusClass:
    """
    Partition a remote run status.

    Anything outside the two terminal sets is treated as still in progress, so
    new intermediate statuses on the platform need no code change.
    """
    if status in FAILURE_STATUSES:
        return "failure"
    if status in SUCCESS_STATUSES:
        return "success"
    return "pending"


@dataclass(frozen=True, slots=True)
class RunRequest:
    """
    Public run submission contract.

    `workspace_id` is bound by the orchestrator via `with_workspace()`; callers
    leave it empty.
    """

    message: str
    auto_apply: bool = True
    is_destroy: bool = False
    workspace_id: str = ""

    # Resource addresses to force-replace / restrict the run to
    replace_addrs: tuple[str, ...] | None = None
    target_addrs: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "replace_addrs", _as_addrs(self.replace_addrs))
        object.__setattr__(self, "target_addrs", _as_addrs(self.target_addrs))

    def with_workspace(self, workspace_id: str) -> RunRequest:
        return replace(self, workspace_id=workspace_id)


def _as_addrs(addrs: Sequence[str] | None) -> tuple[str, ...] | None:
    if not addrs:
        return None
    return tuple(addrs)
