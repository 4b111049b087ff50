from __future__ import annotations

from dataclasses import dataclass

WorkspaceID = str


@dataclass(frozen=True, slots=True)
class WorkspaceRef:
    """Caller-facing workspace handle; resolved once per orchestration call."""

    organization: str
    workspace_name: str

    def short_name(self) -> str:
        """Human-friendly identifier for logs."""
        return f"{self.organization}/{self.workspace_name}"
