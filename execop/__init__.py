"""execop - run an external command with a timeout and a failure policy"""

from execop.config import ExecutionConfig, Project
from execop.errors import (
    ConfigurationError,
    ExecError,
    ExecTimeoutError,
    ExitStatusError,
    FailureKind,
    InvalidWorkingDirectoryError,
    OutputCaptureError,
    SpawnError,
    StandardErrorFailure,
    StandardOutputFailure,
)
from execop.executor import ExecutionOutcome, ProcessExecutor
from execop.operation import ExecOperation, ExecutionResult, LoggingReporter, Reporter
from execop.platforms import Platform, classify
from execop.policy import FailureMode, Verdict, evaluate

__version__ = "0.1.0"
