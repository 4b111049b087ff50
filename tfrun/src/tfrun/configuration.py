from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tfrun.contracts import ActionConfig

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

_TRUE_VALUES = {"true", "True", "TRUE"}
_FALSE_VALUES = {"false", "False", "FALSE"}

# action input name -> (config field, kind)
_ACTION_INPUTS: dict[str, tuple[str, str]] = {
    "organization": ("organization", "str"),
    "workspace": ("workspace", "str"),
    "tfe_hostname": ("hostname", "str"),
    "tfe_token": ("token", "str"),
    "wait-for-run": ("wait_for_run", "bool"),
    "skip-run": ("skip_run", "bool"),
    "message": ("message", "str"),
    "auto-apply": ("auto_apply", "bool"),
    "is-destroy": ("is_destroy", "bool"),
    "replace-addrs": ("replace_addrs", "lines"),
    "target-addrs": ("target_addrs", "lines"),
    "output-rename": ("output_rename", "pairs"),
    "static-outputs": ("static_outputs", "pairs"),
}

_POLL_INPUTS: dict[str, tuple[str, str]] = {
    "run-poll-interval": ("run_poll", "interval_s"),
    "run-poll-timeout": ("run_poll", "timeout_s"),
    "run-poll-max-interval": ("run_poll", "max_interval_s"),
    "run-poll-backoff": ("run_poll", "backoff_factor"),
    "output-poll-interval": ("output_poll", "interval_s"),
    "output-poll-timeout": ("output_poll", "timeout_s"),
}


class ConfigError(ValueError):
    pass


def load_yaml(path: str | Path) -> dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ConfigError(f"YAML root must be a mapping: {path}")
    return payload


def load_action_config(path: str | Path) -> ActionConfig:
    return load_action_config_dict(load_yaml(path))


def load_action_config_dict(payload: Mapping[str, Any]) -> ActionConfig:
    resolved = resolve_env_vars(dict(payload))
    try:
        return ActionConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error("action", exc)) from exc


def config_from_action_inputs(env: Mapping[str, str] | None = None) -> ActionConfig:
    """
    Build an ActionConfig from GitHub Action inputs (`INPUT_<NAME>` variables).

    Unset or empty inputs fall back to the config defaults.
    """
    environ = os.environ if env is None else env
    payload: dict[str, Any] = {}

    for input_name, (field_name, kind) in _ACTION_INPUTS.items():
        raw = _read_input(environ, input_name)
        if raw is None:
            continue
        if kind == "bool":
            payload[field_name] = _parse_bool_input(input_name, raw)
        elif kind == "lines":
            payload[field_name] = [line.strip() for line in raw.splitlines() if line.strip()]
        elif kind == "pairs":
            payload[field_name] = raw
        else:
            payload[field_name] = raw.strip()

    for input_name, (section, key) in _POLL_INPUTS.items():
        raw = _read_input(environ, input_name)
        if raw is None:
            continue
        payload.setdefault(section, {})[key] = raw.strip()

    try:
        return ActionConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error("inputs", exc)) from exc


def resolve_env_vars(payload: Any) -> Any:
    return _resolve_env_vars(payload, path="$")


def _resolve_env_vars(payload: Any, *, path: str) -> Any:
    if isinstance(payload, Mapping):
        return {
            str(key): _resolve_env_vars(value, path=f"{path}.{key}")
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [
            _resolve_env_vars(value, path=f"{path}[{index}]") for index, value in enumerate(payload)
        ]
    if isinstance(payload, str):
        return _substitute_env(payload, path=path)
    return payload


def _substitute_env(value: str, *, path: str) -> str:
    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        env_value = os.environ.get(key)
        if env_value is None:
            raise ConfigError(f"Missing environment variable '{key}' at {path}")
        return env_value

    return _ENV_VAR_PATTERN.sub(replace, value)


def _read_input(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(f"INPUT_{name.replace(' ', '_').upper()}")
    if value is None or not value.strip():
        return None
    return value


def _parse_bool_input(name: str, raw: str) -> bool:
    value = raw.strip()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def _format_validation_error(prefix: str, exc: ValidationError) -> str:
    details: list[str] = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in error["loc"])
        details.append(f"{prefix}.{loc}: {error['msg']}")
    return "; ".join(details)
