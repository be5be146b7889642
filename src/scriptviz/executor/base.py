"""
Result types and the subprocess helper shared by script runners.

A run has two layers of outcome.  :class:`ProcessOutcome` is what the
operating system reports about the child process (output streams, exit
status, whether the wall-clock timer fired).  :class:`ExecutionResult` is
the classified result returned to the pipeline: succeeded or failed, the
public artifact URL on success and the diagnostics on failure.

Resource limitations beyond the wall-clock timeout are not enforced here.
Submitted scripts run with the privileges of the service.
"""

from __future__ import annotations

import enum
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import ArtifactMissingError, ExecutionError, ExecutionTimeoutError


class ExecutionStatus(str, enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(str, enum.Enum):
    EXIT_STATUS = "exit_status"
    SPAWN = "spawn"
    TIMEOUT = "timeout"
    ARTIFACT_MISSING = "artifact_missing"


@dataclass
class ExecutionResult:
    """Classified result of running a staged script.

    Attributes
    ----------
    status: ExecutionStatus
        ``succeeded`` only when the interpreter exited with status zero
        (and, when verification is on, the artifact exists).
    artifact_url: str, optional
        Public URL of the artifact.  Set on success only.
    diagnostics: str, optional
        Standard error of the interpreter, or the reason it could not be
        started.  Set on failure only.
    failure: FailureKind, optional
        Why the run failed.
    exit_code: int, optional
        Exit status of the process; ``None`` if it never started.
    duration_ms: int
        Wall-clock execution time in milliseconds.
    stdout: str
        Standard output captured from the execution.
    """

    status: ExecutionStatus
    artifact_url: Optional[str] = None
    diagnostics: Optional[str] = None
    failure: Optional[FailureKind] = None
    exit_code: Optional[int] = None
    duration_ms: int = 0
    stdout: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is ExecutionStatus.SUCCEEDED

    def raise_for_failure(self) -> None:
        """Raise the error matching ``failure``; do nothing on success."""
        if self.succeeded:
            return
        if self.failure is FailureKind.TIMEOUT:
            raise ExecutionTimeoutError(self.diagnostics)
        if self.failure is FailureKind.ARTIFACT_MISSING:
            raise ArtifactMissingError(self.diagnostics)
        raise ExecutionError(self.diagnostics)


@dataclass
class ProcessOutcome:
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int
    timed_out: bool = False


def run_subprocess(args: list[str], cwd: Path, timeout: int) -> ProcessOutcome:
    """
    Invoke a subprocess and capture its output, killing it after
    ``timeout`` seconds of wall-clock time.

    The call blocks until the process exits.  ``OSError`` from spawning the
    process (for example a missing interpreter) propagates to the caller.

    Parameters
    ----------
    args: list[str]
        Command and arguments to execute.  Never passed through a shell.
    cwd: Path
        Working directory for the subprocess.
    timeout: int
        Maximum wall-clock time in seconds.

    Returns
    -------
    ProcessOutcome
        Contains the process outputs and exit status.
    """
    start_time = time.perf_counter()
    # Interpreters may print in a non-UTF-8 locale; undecodable bytes are replaced
    process = subprocess.Popen(
        args,
        cwd=str(cwd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        encoding="utf-8",
        errors="replace",
    )

    timed_out = False

    def kill_proc() -> None:
        nonlocal timed_out
        if process.poll() is not None:
            return
        timed_out = True
        try:
            process.kill()
        except ProcessLookupError:
            # exited between the poll and the kill
            pass

    # Start timer thread to enforce wall clock timeout
    timer = threading.Timer(timeout, kill_proc)
    timer.start()

    try:
        stdout, stderr = process.communicate()
    finally:
        duration = int((time.perf_counter() - start_time) * 1000)
        timer.cancel()
    exit_code = process.returncode if process.returncode is not None else -1
    # a script that exited on its own is not a timeout, even if the timer fired
    timed_out = timed_out and exit_code < 0
    if timed_out:
        stderr = (stderr or "") + "\nExecution timed out after " + str(timeout) + " seconds."
        exit_code = -9
    return ProcessOutcome(stdout or "", stderr or "", exit_code, duration, timed_out)
