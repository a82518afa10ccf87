"""Failure policy: turns a process outcome into a pass/fail verdict"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Sequence, Union

from execop.errors import ConfigurationError, ERRORS_BY_KIND, ExecError, FailureKind
from execop.executor import ExecutionOutcome


class FailureMode(str, Enum):
    """
    Named failure trigger, or a shorthand union of triggers

    EXIT      exit value > 0
    STDERR    any data on stderr
    STDOUT    any data on stdout
    OUTPUT    STDOUT or STDERR
    NORMAL    EXIT or STDERR (default)
    ALL       EXIT, STDOUT or STDERR
    NONE      never fails on exit value or output
    """

    EXIT = "exit"
    STDERR = "stderr"
    STDOUT = "stdout"
    OUTPUT = "output"
    NORMAL = "normal"
    ALL = "all"
    NONE = "none"

    @classmethod
    def parse(cls, value: Union[str, "FailureMode"]) -> "FailureMode":
        """Accept a FailureMode or its name in any case"""
        if isinstance(value, FailureMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(mode.name for mode in cls)
            raise ConfigurationError(f"Invalid failure mode: {value!r}. Valid modes: {valid}") from None


PRIMITIVE_MODES = frozenset({FailureMode.EXIT, FailureMode.STDERR, FailureMode.STDOUT})

_EXPANSIONS = {
    FailureMode.EXIT: frozenset({FailureMode.EXIT}),
    FailureMode.STDERR: frozenset({FailureMode.STDERR}),
    FailureMode.STDOUT: frozenset({FailureMode.STDOUT}),
    FailureMode.OUTPUT: frozenset({FailureMode.STDOUT, FailureMode.STDERR}),
    FailureMode.NORMAL: frozenset({FailureMode.EXIT, FailureMode.STDERR}),
    FailureMode.ALL: PRIMITIVE_MODES,
    FailureMode.NONE: frozenset(),
}


def expand_modes(modes: Iterable[FailureMode]) -> FrozenSet[FailureMode]:
    """Reduce a mode set to primitive triggers, defaulting to NORMAL when empty"""
    modes = frozenset(modes)
    if not modes:
        return _EXPANSIONS[FailureMode.NORMAL]

    primitives = frozenset()
    for mode in modes:
        primitives |= _EXPANSIONS[mode]
    return primitives


def modes_from_flag(fail_on_exit: bool) -> FrozenSet[FailureMode]:
    """Lower the legacy fail-on-exit boolean into a mode set"""
    return frozenset({FailureMode.EXIT}) if fail_on_exit else frozenset({FailureMode.NONE})


@dataclass(frozen=True)
class Verdict:
    """Result of evaluating an outcome; kind is None on success"""

    kind: Optional[FailureKind] = None
    detail: str = ""
    exit_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @property
    def message(self) -> str:
        """Human-readable failure message"""
        if self.kind is FailureKind.STANDARD_ERROR:
            return f"STDERR -> {self.detail}"
        if self.kind is FailureKind.STANDARD_OUTPUT:
            return f"STDOUT -> {self.detail}"
        return self.detail

    def to_error(self) -> ExecError:
        if self.ok:
            raise ValueError("A successful verdict has no error")
        error_class = ERRORS_BY_KIND[self.kind]
        if self.kind is FailureKind.EXIT_STATUS:
            return error_class(self.message, self.detail, exit_code=self.exit_code)
        return error_class(self.message, self.detail)


SUCCESS = Verdict()


def _first(lines: Sequence[str]) -> Optional[str]:
    return lines[0] if lines else None


def evaluate(outcome: ExecutionOutcome, modes: Iterable[FailureMode]) -> Verdict:
    """
    Decide whether an outcome is a failure under the given modes

    A timeout always fails. Otherwise triggers are checked in fixed
    precedence (exit value, then stderr, then stdout) and only the first
    match is reported.
    """
    if outcome.timed_out:
        if outcome.timeout is not None:
            detail = f"timed out after {outcome.timeout:g} seconds"
        else:
            detail = "timed out"
        return Verdict(FailureKind.TIMEOUT, detail)

    modes = frozenset(modes)
    if FailureMode.NONE in modes:
        return SUCCESS

    triggers = expand_modes(modes)
    exit_code = outcome.exit_code

    if FailureMode.EXIT in triggers and exit_code is not None and exit_code > 0:
        detail = f"exit value/status {exit_code}"
        if outcome.stderr:
            detail += f", STDERR -> {_first(outcome.stderr)}"
        elif outcome.stdout:
            detail += f", STDOUT -> {_first(outcome.stdout)}"
        return Verdict(FailureKind.EXIT_STATUS, detail, exit_code)

    if FailureMode.STDERR in triggers and outcome.stderr:
        return Verdict(FailureKind.STANDARD_ERROR, _first(outcome.stderr))

    if FailureMode.STDOUT in triggers and outcome.stdout:
        return Verdict(FailureKind.STANDARD_OUTPUT, _first(outcome.stdout))

    return SUCCESS
