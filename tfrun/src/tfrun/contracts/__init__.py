from .action_config import ActionConfig, PollSettings
from .action_result import ActionResult
from .outputs import CallerOutputs, Output, OutputSet
from .polling import DEFAULT_OUTPUT_POLL, DEFAULT_RUN_POLL, PollPolicy
from .remote_api import RemoteAPIClient
from .run_request import (
    FAILURE_STATUSES,
    SUCCESS_STATUSES,
    RunID,
    RunRequest,
    RunStatus,
    classify_status,
)
from .workspace import WorkspaceID, WorkspaceRef

__all__ = [
    "ActionConfig",
    "ActionResult",
    "PollSettings",
    "PollPolicy",
    "DEFAULT_RUN_POLL",
    "DEFAULT_OUTPUT_POLL",
    "Output",
    "OutputSet",
    "CallerOutputs",
    "RemoteAPIClient",
    "RunRequest",
    "RunID",
    "RunStatus",
    "SUCCESS_STATUSES",
    "FAILURE_STATUSES",
    "classify_status",
    "WorkspaceID",
    "WorkspaceRef",
]
