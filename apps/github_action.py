from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from collections.abc import Mapping
from typing import TextIO

from tfrun.api import run_action
from tfrun.configuration import ConfigError, config_from_action_inputs
from tfrun.contracts import ActionResult, RemoteAPIClient
from tfrun.errors import TfRunError
from tfrun.runtime.polling import Sleep

_GROUP_NAME = "terraform-cloud-run"
_NO_OUTPUT_FILE = "GITHUB_OUTPUT is not set; step outputs cannot be published"


class WorkflowCommandFormatter(logging.Formatter):
    """Render log records as GitHub workflow commands."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"::error::{message}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{message}"
        if record.levelno <= logging.DEBUG:
            return f"::debug::{message}"
        return message


class WorkflowCommands:
    def __init__(self, stream: TextIO, env: Mapping[str, str]) -> None:
        self._stream = stream
        self._output_path = env.get("GITHUB_OUTPUT")

    def add_mask(self, value: str) -> None:
        for line in value.splitlines() or [value]:
            if line:
                self._stream.write(f"::add-mask::{line}\n")

    @property
    def can_set_outputs(self) -> bool:
        return bool(self._output_path)

    def set_output(self, name: str, value: str) -> None:
        if not self._output_path:
            raise ConfigError(_NO_OUTPUT_FILE)
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(self._output_path, "a", encoding="utf-8") as handle:
            handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def start_group(self, name: str) -> None:
        self._stream.write(f"::group::{name}\n")

    def end_group(self) -> None:
        self._stream.write("::endgroup::\n")

    def error(self, message: str) -> None:
        self._stream.write(f"::error::{message}\n")


def configure_logging(stream: TextIO) -> logging.Logger:
    logger = logging.getLogger("tfrun")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def _mask_forms(secret: str) -> list[str]:
    # workspace-outputs is a JSON document, so secrets also appear escaped
    forms = [secret]
    escaped = json.dumps(secret)[1:-1]
    if escaped != secret:
        forms.append(escaped)
    return forms


def publish(result: ActionResult, commands: WorkflowCommands) -> None:
    if result.outputs is not None:
        for secret in result.outputs.secret_values():
            for form in _mask_forms(secret):
                commands.add_mask(form)
        commands.set_output("workspace-outputs", result.outputs.to_json())
    commands.set_output("run-id", result.run_id)


def run(
    *,
    env: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
    client: RemoteAPIClient | None = None,
    sleep: Sleep | None = None,
) -> int:
    environ = os.environ if env is None else env
    out = stream or sys.stdout
    commands = WorkflowCommands(out, environ)
    logger = configure_logging(out)

    commands.start_group(_GROUP_NAME)
    try:
        config = config_from_action_inputs(environ)
        if not commands.can_set_outputs:
            raise ConfigError(_NO_OUTPUT_FILE)
        result = run_action(config, client=client, logger=logger.getChild("action"), sleep=sleep)
        publish(result, commands)
    except (ConfigError, TfRunError) as exc:
        commands.error(str(exc))
        return 1
    finally:
        commands.end_group()
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
