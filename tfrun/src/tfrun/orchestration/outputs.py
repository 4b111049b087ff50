from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from tfrun.contracts.outputs import CallerOutputs, OutputSet
from tfrun.errors import OutputsUnavailableError


class OutputTransformer:
    """
    Maps raw state-version outputs onto the caller's output contract.

    `rename` maps wire names to caller names; `static_outputs` are extra
    constant values published alongside the workspace outputs.
    """

    def __init__(
        self,
        *,
        rename: Mapping[str, str] | None = None,
        static_outputs: Mapping[str, str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._rename = dict(rename or {})
        self._static_outputs = dict(static_outputs or {})
        self._logger = logger or logging.getLogger("tfrun.outputs")

    def transform(self, outputs: OutputSet, *, workspace_id: str | None = None) -> CallerOutputs:
        if not outputs:
            raise OutputsUnavailableError(
                f"state version in workspace {workspace_id or '<unknown>'} "
                "has no available outputs."
            )

        values: dict[str, str] = {}
        sensitive: set[str] = set()
        for output in outputs:
            name = self._rename.get(output.name, output.name)
            values[name] = to_caller_value(output.value)
            if output.sensitive:
                sensitive.add(name)

        # static values replace workspace outputs of the same name, sensitivity included
        values.update(self._static_outputs)
        sensitive.difference_update(self._static_outputs)
        self._logger.debug(
            "Transformed %d outputs (%d sensitive)", len(values), len(sensitive)
        )
        return CallerOutputs(values=values, sensitive_names=frozenset(sensitive))


def to_caller_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))
