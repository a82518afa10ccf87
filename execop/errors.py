"""Failure taxonomy for command execution"""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Machine-distinguishable reason an execution failed"""

    CONFIGURATION_ERROR = "configuration_error"
    INVALID_WORKING_DIRECTORY = "invalid_working_directory"
    SPAWN_ERROR = "spawn_error"
    TIMEOUT = "timeout"
    EXIT_STATUS = "exit_status"
    STANDARD_ERROR = "standard_error"
    STANDARD_OUTPUT = "standard_output"
    OUTPUT_CAPTURE = "output_capture"


class ExecError(Exception):
    """Base class for every failure surfaced by an execution"""

    kind: FailureKind = FailureKind.CONFIGURATION_ERROR

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class ConfigurationError(ExecError):
    """Missing execution context or an invalid option value"""

    kind = FailureKind.CONFIGURATION_ERROR


class InvalidWorkingDirectoryError(ExecError):
    kind = FailureKind.INVALID_WORKING_DIRECTORY


class SpawnError(ExecError):
    """The OS could not start the executable"""

    kind = FailureKind.SPAWN_ERROR


class ExecTimeoutError(ExecError):
    kind = FailureKind.TIMEOUT


class ExitStatusError(ExecError):
    kind = FailureKind.EXIT_STATUS

    def __init__(self, message: str, detail: Optional[str] = None, exit_code: Optional[int] = None):
        super().__init__(message, detail)
        self.exit_code = exit_code


class StandardErrorFailure(ExecError):
    kind = FailureKind.STANDARD_ERROR


class StandardOutputFailure(ExecError):
    kind = FailureKind.STANDARD_OUTPUT


class OutputCaptureError(ExecError):
    """An output stream could not be read to completion"""

    kind = FailureKind.OUTPUT_CAPTURE


ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (
        ConfigurationError,
        InvalidWorkingDirectoryError,
        SpawnError,
        ExecTimeoutError,
        ExitStatusError,
        StandardErrorFailure,
        StandardOutputFailure,
        OutputCaptureError,
    )
}
