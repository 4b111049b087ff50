from __future__ import annotations

from dataclasses import dataclass

from tfrun.contracts.outputs import CallerOutputs


@dataclass(frozen=True, slots=True)
class ActionResult:
    # Empty when run creation was skipped
    run_id: str

    # None for destroy runs
    outputs: CallerOutputs | None = None
