from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Output:
    """A single state-version output as reported by the remote platform."""

    name: str
    type: str
    sensitive: bool
    value: Any

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> Output:
        return cls(
            name=str(attributes["name"]),
            type=str(attributes.get("type", "")),
            sensitive=bool(attributes.get("sensitive", False)),
            value=attributes.get("value"),
        )


OutputSet = tuple[Output, ...]


@dataclass(frozen=True, slots=True)
class CallerOutputs:
    """
    Outputs in the shape the CI caller publishes them.

    Every value is a string; `sensitive_names` lists the outputs whose values
    the caller must scrub from its logs.
    """

    values: Mapping[str, str] = field(default_factory=dict)
    sensitive_names: frozenset[str] = frozenset()

    def secret_values(self) -> list[str]:
        return [self.values[name] for name in self.values if name in self.sensitive_names]

    def to_json(self) -> str:
        return json.dumps(dict(self.values))
