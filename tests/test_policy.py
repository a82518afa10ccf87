"""Test failure policy evaluation"""

import pytest

from execop.errors import (
    ExecTimeoutError,
    ExitStatusError,
    FailureKind,
    StandardErrorFailure,
    StandardOutputFailure,
)
from execop.errors import ConfigurationError
from execop.executor import ExecutionOutcome
from execop.policy import FailureMode, evaluate, expand_modes, modes_from_flag


def outcome(exit_code=0, stdout=(), stderr=(), timed_out=False, timeout=30.0):
    return ExecutionOutcome(
        exit_code=exit_code,
        stdout=tuple(stdout),
        stderr=tuple(stderr),
        timed_out=timed_out,
        timeout=timeout
    )


@pytest.mark.parametrize("mode", list(FailureMode))
def test_clean_exit_always_succeeds(mode):
    """Test that exit 0 with no output succeeds under every mode"""
    assert evaluate(outcome(), {mode}).ok


def test_clean_exit_succeeds_without_modes():
    assert evaluate(outcome(), set()).ok


def test_exit_status_failure():
    verdict = evaluate(outcome(exit_code=2), {FailureMode.EXIT})
    assert verdict.kind is FailureKind.EXIT_STATUS
    assert verdict.exit_code == 2
    assert "2" in verdict.detail
    assert verdict.message == "exit value/status 2"


def test_exit_status_mentions_first_stderr_line():
    verdict = evaluate(outcome(exit_code=1, stdout=["out"], stderr=["first", "second"]), {FailureMode.EXIT})
    assert verdict.message == "exit value/status 1, STDERR -> first"


def test_exit_status_falls_back_to_stdout_line():
    verdict = evaluate(outcome(exit_code=1, stdout=["only out"]), {FailureMode.EXIT})
    assert verdict.message == "exit value/status 1, STDOUT -> only out"


def test_none_overrides_everything():
    """Test that NONE wins even when combined with other modes"""
    verdict = evaluate(outcome(exit_code=137, stderr=["boom"]), {FailureMode.NONE, FailureMode.ALL})
    assert verdict.ok


def test_none_does_not_override_timeout():
    verdict = evaluate(outcome(exit_code=None, timed_out=True, timeout=5), {FailureMode.NONE})
    assert verdict.kind is FailureKind.TIMEOUT
    assert verdict.message == "timed out after 5 seconds"


def test_stderr_failure_detail_is_first_line():
    verdict = evaluate(outcome(stderr=["warning: x", "more"]), {FailureMode.STDERR})
    assert verdict.kind is FailureKind.STANDARD_ERROR
    assert verdict.detail == "warning: x"
    assert verdict.message == "STDERR -> warning: x"


def test_stdout_failure_detail_is_first_line():
    verdict = evaluate(outcome(stdout=["hello"]), {FailureMode.STDOUT})
    assert verdict.kind is FailureKind.STANDARD_OUTPUT
    assert verdict.detail == "hello"


def test_stdout_ignored_by_default():
    """Test that the default (NORMAL) does not fail on stdout"""
    assert evaluate(outcome(stdout=["chatty"]), set()).ok


def test_default_fails_on_stderr():
    verdict = evaluate(outcome(stderr=["oops"]), set())
    assert verdict.kind is FailureKind.STANDARD_ERROR


def test_exit_mode_ignores_output():
    assert evaluate(outcome(stdout=["a"], stderr=["b"]), {FailureMode.EXIT}).ok


def test_negative_exit_code_is_not_exit_failure():
    assert evaluate(outcome(exit_code=-9), {FailureMode.EXIT}).ok


def test_precedence_exit_before_stderr_before_stdout():
    """Test that only the highest-precedence trigger is reported"""
    everything = outcome(exit_code=3, stdout=["out"], stderr=["err"])
    assert evaluate(everything, {FailureMode.ALL}).kind is FailureKind.EXIT_STATUS

    no_exit = outcome(stdout=["out"], stderr=["err"])
    assert evaluate(no_exit, {FailureMode.ALL}).kind is FailureKind.STANDARD_ERROR
    assert evaluate(no_exit, {FailureMode.STDOUT}).kind is FailureKind.STANDARD_OUTPUT


def test_output_mode_covers_both_streams():
    assert evaluate(outcome(stdout=["x"]), {FailureMode.OUTPUT}).kind is FailureKind.STANDARD_OUTPUT
    assert evaluate(outcome(stderr=["y"]), {FailureMode.OUTPUT}).kind is FailureKind.STANDARD_ERROR
    assert evaluate(outcome(exit_code=1), {FailureMode.OUTPUT}).ok


def test_expand_modes():
    assert expand_modes([]) == {FailureMode.EXIT, FailureMode.STDERR}
    assert expand_modes([FailureMode.ALL]) == {FailureMode.EXIT, FailureMode.STDERR, FailureMode.STDOUT}
    assert expand_modes([FailureMode.OUTPUT, FailureMode.EXIT]) == {
        FailureMode.EXIT, FailureMode.STDERR, FailureMode.STDOUT
    }


def test_legacy_flag_lowers_to_modes():
    assert modes_from_flag(True) == {FailureMode.EXIT}
    assert modes_from_flag(False) == {FailureMode.NONE}


def test_parse_mode_names():
    assert FailureMode.parse("STDERR") is FailureMode.STDERR
    assert FailureMode.parse(" all ") is FailureMode.ALL
    assert FailureMode.parse(FailureMode.NONE) is FailureMode.NONE
    with pytest.raises(ConfigurationError):
        FailureMode.parse("sometimes")


@pytest.mark.parametrize("verdict_outcome, modes, error_class", [
    (outcome(exit_code=None, timed_out=True), set(), ExecTimeoutError),
    (outcome(exit_code=4), {FailureMode.EXIT}, ExitStatusError),
    (outcome(stderr=["e"]), {FailureMode.STDERR}, StandardErrorFailure),
    (outcome(stdout=["o"]), {FailureMode.STDOUT}, StandardOutputFailure),
])
def test_verdict_to_error(verdict_outcome, modes, error_class):
    verdict = evaluate(verdict_outcome, modes)
    error = verdict.to_error()
    assert isinstance(error, error_class)
    assert error.kind is verdict.kind
    assert str(error) == verdict.message
