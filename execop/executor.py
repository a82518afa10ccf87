"""Process execution with timeout and concurrent output capture"""

import logging
import os
import signal
import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import psutil

from execop.drain import OutputDrain
from execop.errors import OutputCaptureError, SpawnError
from execop.utils import format_command

logger = logging.getLogger(__name__)

# Own session per child so the whole tree can be killed as one group
_NEW_SESSION = os.name == "posix"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Raw result of running a process once"""

    exit_code: Optional[int]
    stdout: Tuple[str, ...] = ()
    stderr: Tuple[str, ...] = ()
    timed_out: bool = False
    pid: Optional[int] = None
    elapsed: float = 0.0
    timeout: Optional[float] = None


class ProcessExecutor:
    """Spawns a command vector, drains its output and enforces a timeout"""

    def __init__(self, encoding: str = "utf-8", drain_grace: float = 2.0):
        self.encoding = encoding
        self.drain_grace = drain_grace

    def run(
        self,
        command: Sequence[str],
        work_dir: Union[str, os.PathLike],
        timeout: float
    ) -> ExecutionOutcome:
        """
        Run a command to completion or until the timeout elapses

        Returns:
            ExecutionOutcome: exit_code is None when the process was killed
            for exceeding the timeout

        Raises:
            SpawnError: the executable could not be started
            OutputCaptureError: an output stream failed to read or never closed
        """
        args = list(command)
        logger.info(f"Executing command: {format_command(args)} (cwd={work_dir}, timeout={timeout:g}s)")

        try:
            process = subprocess.Popen(
                args,
                cwd=os.fspath(work_dir),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=_NEW_SESSION
            )
        except (OSError, ValueError) as e:
            reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
            logger.error(f"Cannot start {args[0]!r}: {reason}")
            raise SpawnError(f'Cannot run program "{args[0]}": {reason}') from e

        started = time.monotonic()
        deadline = started + timeout
        stdout_drain = OutputDrain(process.stdout, "stdout", self.encoding).start()
        stderr_drain = OutputDrain(process.stderr, "stderr", self.encoding).start()
        drains = (stdout_drain, stderr_drain)

        timed_out = False
        exit_code: Optional[int] = None
        try:
            exit_code = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            logger.warning(f"Command timed out after {timeout:g} seconds, killing PID {process.pid}")
            self._kill(process)
        finally:
            # Reap on every path, including an interrupted wait
            if process.poll() is None:
                self._kill(process)

        if not timed_out and not self._join_all(drains, deadline):
            # Exited in time, but descendants still hold the pipes open
            logger.warning(
                f"Output of PID {process.pid} still open after {timeout:g} seconds, killing its descendants"
            )
            self._kill_group(process)

        self._join_all(drains, time.monotonic() + self.drain_grace)
        elapsed = time.monotonic() - started

        if timed_out:
            # Verdict is a timeout regardless; keep only streams that closed cleanly
            stdout = stdout_drain.lines if stdout_drain.complete else ()
            stderr = stderr_drain.lines if stderr_drain.complete else ()
            exit_code = None
        else:
            for drain in drains:
                self._check_complete(drain)
            stdout = stdout_drain.lines
            stderr = stderr_drain.lines
            logger.info(f"Command completed with exit code: {exit_code} in {elapsed:.2f}s")

        return ExecutionOutcome(
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            timed_out=timed_out,
            pid=process.pid,
            elapsed=elapsed,
            timeout=timeout
        )

    def _kill(self, process: subprocess.Popen):
        """Hard-kill the process, its process group and any known descendants, then reap it"""
        try:
            children = psutil.Process(process.pid).children(recursive=True)
        except psutil.NoSuchProcess:
            children = []

        self._kill_group(process)

        for child in children:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass

        try:
            process.kill()
        except ProcessLookupError:
            pass
        process.wait()
        psutil.wait_procs(children, timeout=self.drain_grace)

    @staticmethod
    def _kill_group(process: subprocess.Popen):
        """Kill every process left in the child's process group"""
        if not _NEW_SESSION:
            return
        # Descendants stay in the group even after the leader exits
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass

    @staticmethod
    def _join_all(drains: Sequence[OutputDrain], deadline: float) -> bool:
        """Join every drain against one shared deadline"""
        for drain in drains:
            drain.join(max(deadline - time.monotonic(), 0.0))
        return all(drain.finished for drain in drains)

    def _check_complete(self, drain: OutputDrain):
        if not drain.finished:
            logger.error(f"Abandoning {drain.name} drain; stream did not close after killing descendants")
            raise OutputCaptureError(f"{drain.name} was not closed by the process or its descendants")
        if drain.error is not None:
            logger.error(f"Reading {drain.name} failed: {drain.error}")
            raise OutputCaptureError(f"Failed to read {drain.name}: {drain.error}")
