from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tfrun.contracts.polling import PollPolicy

DEFAULT_RUN_MESSAGE = "Queued via terraform-cloud-run"


class PollSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    interval_s: float = Field(default=3.0, ge=0)
    max_interval_s: float | None = Field(default=None, ge=0)
    backoff_factor: float = Field(default=1.0, ge=1.0)
    timeout_s: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_max_interval(self) -> PollSettings:
        if self.max_interval_s is not None and self.max_interval_s < self.interval_s:
            raise ValueError("max_interval_s must be >= interval_s")
        return self

    def to_policy(self) -> PollPolicy:
        return PollPolicy(
            interval_s=self.interval_s,
            max_interval_s=self.max_interval_s,
            backoff_factor=self.backoff_factor,
            timeout_s=self.timeout_s,
        )


class ActionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    organization: str = Field(min_length=1)
    workspace: str = Field(min_length=1)
    hostname: str = Field(default="app.terraform.io", min_length=1)
    token: str = Field(min_length=1, repr=False)

    wait_for_run: bool = True
    skip_run: bool = False

    message: str | None = None
    auto_apply: bool = True
    is_destroy: bool = False
    replace_addrs: list[str] = Field(default_factory=list)
    target_addrs: list[str] = Field(default_factory=list)

    output_rename: dict[str, str] = Field(default_factory=dict)
    static_outputs: dict[str, str] = Field(default_factory=dict)

    run_poll: PollSettings = Field(default_factory=PollSettings)
    output_poll: PollSettings = Field(default_factory=lambda: PollSettings(interval_s=1.0))
    request_timeout_s: float = Field(default=30.0, gt=0)

    @field_validator("replace_addrs", "target_addrs", mode="before")
    @classmethod
    def _coerce_addrs(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [line.strip() for line in value.splitlines() if line.strip()]
        if isinstance(value, list):
            return value
        raise ValueError("addresses must be a list or a newline-separated string")

    @field_validator("output_rename", "static_outputs", mode="before")
    @classmethod
    def _coerce_pairs(cls, value: Any) -> dict[str, str]:
        if value is None:
            return {}
        if isinstance(value, str):
            return parse_pairs(value)
        return value


def parse_pairs(text: str) -> dict[str, str]:
    """Parse newline-separated ``name=value`` lines; blank lines are skipped."""
    pairs: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        name, sep, value = line.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"expected 'name=value', got {line.strip()!r}")
        pairs[name.strip()] = value.strip()
    return pairs
