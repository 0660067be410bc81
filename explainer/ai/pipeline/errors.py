"""
Pipeline errors.

Non-recoverable conditions leave the pipeline as one of these. Recoverable
ones (a single image failing) never do: they are absorbed at the join.

    PipelineError
    ├── InvalidRequestError   rejected before any remote call
    ├── UpstreamError         endpoint answered with an error or a bad body
    └── StageTimeoutError     a stage's own timer fired
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for every pipeline failure."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class InvalidRequestError(PipelineError):
    """Malformed or oversized question, malformed custom style."""


class UpstreamError(PipelineError):
    """A remote call failed (non-success status, transport error, malformed body)."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, stage=stage)
        self.status_code = status_code


class StageTimeoutError(PipelineError):
    """A stage did not answer within its budget."""

    def __init__(self, stage: str, timeout_s: float):
        super().__init__(f"Stage '{stage}' timed out after {timeout_s:g}s", stage=stage)
        self.timeout_s = timeout_s
