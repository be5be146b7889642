"""
Run a staged script with the interpreter chosen by the execution plan.

The command line is always ``<interpreter> <script path> <artifact path>``.
Submitted code reaches the interpreter only through the staged file; it is
never part of the argument list.  By convention the script writes its
figure to the first argument after the script path (``sys.argv[1]`` in
Python, ``commandArgs(trailingOnly = TRUE)[1]`` in R).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..policy import ExecutionPlan
from ..publisher import ArtifactPublisher
from ..workspace import StagedScript
from .base import ExecutionResult, ExecutionStatus, FailureKind, ProcessOutcome, run_subprocess

logger = logging.getLogger(__name__)


class ScriptRunner:
    """Execute staged scripts and classify the outcome."""

    def __init__(
        self,
        publisher: ArtifactPublisher,
        timeout: int = 60,
        verify_artifacts: bool = True,
    ) -> None:
        """
        Parameters
        ----------
        publisher: ArtifactPublisher
            Used to turn the artifact path into its public URL.
        timeout: int, optional
            Maximum wall-clock time (in seconds) a script may run before
            it is killed and reported as timed out.
        verify_artifacts: bool, optional
            When true, a zero exit status without a non-empty artifact is
            reported as ``artifact_missing`` instead of success.
        """
        self.publisher = publisher
        self.timeout = timeout
        self.verify_artifacts = verify_artifacts

    def run(
        self,
        plan: ExecutionPlan,
        staged: StagedScript,
        artifact_path: Path,
        base_url: Optional[str] = None,
    ) -> ExecutionResult:
        args = [plan.interpreter_command, str(staged.path), str(artifact_path)]
        logger.info("Executing command: %s", args)

        try:
            outcome = run_subprocess(args, cwd=staged.path.parent, timeout=self.timeout)
        except OSError as exc:
            logger.error("Unable to start %s: %s", plan.interpreter_command, exc)
            return ExecutionResult(
                status=ExecutionStatus.FAILED,
                failure=FailureKind.SPAWN,
                diagnostics=f"Unable to start interpreter {plan.interpreter_command!r}: {exc}",
            )

        if outcome.timed_out:
            logger.error("Script %s timed out after %ss", staged.submission_id, self.timeout)
            return self._failed(FailureKind.TIMEOUT, outcome)

        if outcome.exit_code != 0:
            logger.error("Script error (exit_code=%s): %s", outcome.exit_code, outcome.stderr)
            return self._failed(FailureKind.EXIT_STATUS, outcome)

        if self.verify_artifacts and not _has_content(artifact_path):
            logger.error("Script %s exited cleanly but wrote no artifact at %s", staged.submission_id, artifact_path)
            message = (
                f"Script exited successfully but did not write its output to {artifact_path.name}. "
                "The output path is passed as the first argument after the script path."
            )
            if outcome.stderr:
                message += "\n" + outcome.stderr
            outcome.stderr = message
            return self._failed(FailureKind.ARTIFACT_MISSING, outcome)

        url = self.publisher.url_for(artifact_path, base_url)
        logger.info("Success! File available at: %s (duration_ms=%s)", url, outcome.duration_ms)
        return ExecutionResult(
            status=ExecutionStatus.SUCCEEDED,
            artifact_url=url,
            exit_code=outcome.exit_code,
            duration_ms=outcome.duration_ms,
            stdout=outcome.stdout,
        )

    @staticmethod
    def _failed(kind: FailureKind, outcome: ProcessOutcome) -> ExecutionResult:
        return ExecutionResult(
            status=ExecutionStatus.FAILED,
            failure=kind,
            diagnostics=outcome.stderr or f"Interpreter exited with status {outcome.exit_code}",
            exit_code=outcome.exit_code,
            duration_ms=outcome.duration_ms,
            stdout=outcome.stdout,
        )


def _has_content(path: Path) -> bool:
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False
