"""Execution operation: configure, run and judge a single command"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from execop.config import (
    ExecutionConfig,
    get_config_float,
    get_config_modes,
    get_config,
    validate_timeout,
)
from execop.errors import ConfigurationError, ExecError
from execop.executor import ExecutionOutcome, ProcessExecutor
from execop.policy import FailureMode, Verdict, evaluate, modes_from_flag
from execop.utils import format_command
from execop.workdir import resolve_work_dir

logger = logging.getLogger(__name__)


class Reporter(ABC):
    """Sink for informational and diagnostic messages"""

    @abstractmethod
    def info(self, message: str):
        """Report progress or captured output"""

    @abstractmethod
    def error(self, message: str):
        """Report a failure diagnostic"""


class LoggingReporter(Reporter):
    """Forwards messages to a standard library logger"""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def info(self, message: str):
        self.log.info(message)

    def error(self, message: str):
        self.log.error(message)


@dataclass(frozen=True)
class ExecutionResult:
    config: ExecutionConfig
    outcome: ExecutionOutcome
    verdict: Verdict

    @property
    def stdout(self) -> Tuple[str, ...]:
        return self.outcome.stdout

    @property
    def stderr(self) -> Tuple[str, ...]:
        return self.outcome.stderr

    @property
    def exit_code(self) -> Optional[int]:
        return self.outcome.exit_code


class ExecOperation:
    """
    Executes a command on the command line

    Setters mutate the operation and return it, so calls can be chained:

        ExecOperation().from_project(project).command("cat", "notes.txt").fail(FailureMode.ALL).execute()

    The settings are frozen into an ExecutionConfig when execute() starts.
    """

    def __init__(self, reporter: Optional[Reporter] = None, executor: Optional[ProcessExecutor] = None):
        self.reporter = reporter or LoggingReporter()
        self._executor = executor
        self._command: List[str] = []
        self._work_dir: Optional[Union[str, os.PathLike]] = None
        self._project = None
        self._timeout: Optional[float] = None
        self._fail_modes = set()
        self._silent = False

    def command(self, *args):
        """
        Append the executable and/or arguments, or return them when called without any

        Accepts strings, or a single list/tuple of strings:
            op.command("cmd", "/c", "stop.bat")
            op.command(["./stop.sh"])
        """
        if not args:
            return tuple(self._command)
        if len(args) == 1 and isinstance(args[0], (list, tuple)):
            args = args[0]
        self._command.extend(os.fspath(arg) if isinstance(arg, os.PathLike) else arg for arg in args)
        return self

    def work_dir(self, directory: Union[str, os.PathLike]) -> "ExecOperation":
        self._work_dir = directory
        return self

    def from_project(self, project) -> "ExecOperation":
        """Use the project's work_directory as the default working directory"""
        self._project = project
        return self

    def timeout(self, seconds: float) -> "ExecOperation":
        self._timeout = validate_timeout(seconds)
        return self

    def fail(self, *modes: Union[FailureMode, str]) -> "ExecOperation":
        """Add one or more failure modes; see FailureMode"""
        self._fail_modes.update(FailureMode.parse(mode) for mode in modes)
        return self

    def fail_on_exit(self, flag: bool) -> "ExecOperation":
        """Legacy switch: True fails on exit value > 0 only, False never fails on content"""
        self._fail_modes = set(modes_from_flag(flag))
        return self

    def silent(self, flag: bool = True) -> "ExecOperation":
        self._silent = flag
        return self

    def build(self) -> ExecutionConfig:
        """Freeze the current settings"""
        fail_modes = frozenset(self._fail_modes) or get_config_modes()
        project_dir = getattr(self._project, "work_directory", None) if self._project is not None else None
        timeout = self._timeout if self._timeout is not None else get_config_float("timeout")
        return ExecutionConfig(
            command=tuple(self._command),
            work_dir=self._work_dir,
            project_dir=project_dir,
            timeout=timeout,
            fail_modes=fail_modes,
            silent=self._silent,
            encoding=get_config("encoding") or "utf-8",
            drain_grace=get_config_float("drain_grace")
        )

    def execute(self) -> ExecutionResult:
        """
        Run the command and judge its outcome

        Returns:
            ExecutionResult on success

        Raises:
            ExecError: a subclass matching the failure kind
        """
        silent = self._silent
        try:
            config = self.build()
            result = self._run(config)
        except ExecError as e:
            if not silent:
                self.reporter.error(e.message)
            raise

        if not silent:
            for line in result.stdout:
                self.reporter.info(line)
        return result

    def _run(self, config: ExecutionConfig) -> ExecutionResult:
        if self._project is None and config.work_dir is None:
            raise ConfigurationError("A project must be specified.")

        directory = resolve_work_dir(config.work_dir, config.project_dir)

        if not config.silent:
            self.reporter.info(format_command(config.command))

        executor = self._executor or ProcessExecutor(config.encoding, config.drain_grace)
        outcome = executor.run(config.command, directory, config.timeout)
        logger.info(f"Command finished in {outcome.elapsed:.2f}s")
        verdict = evaluate(outcome, config.fail_modes)
        if not verdict.ok:
            logger.debug(f"Command failed ({verdict.kind.value}): {verdict.message}")
            raise verdict.to_error()
        return ExecutionResult(config, outcome, verdict)
