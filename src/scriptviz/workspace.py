"""On-disk staging for submissions.

Two directories are managed:

* the scripts area, holding submitted code only for the lifetime of one
  interpreter run, and
* the outputs area, where interpreters write their artifacts.  Nothing in
  this module writes artifacts; it only decides where they should land.

Both the staged script and the artifact share the submission identifier so
that log lines and files can be correlated.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class StagedScript:
    submission_id: str
    path: Path
    contents: bytes


def new_submission_id() -> str:
    """Return a sortable identifier that is unique across concurrent calls."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex}"


class WorkspaceManager:
    """Stage scripts and allocate artifact paths on the local filesystem."""

    def __init__(self, scripts_dir: str | Path, outputs_dir: str | Path) -> None:
        self.scripts_dir = Path(scripts_dir)
        self.outputs_dir = Path(outputs_dir)
        self.scripts_dir.mkdir(parents=True, exist_ok=True)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    def stage(self, code: str, script_extension: str, submission_id: Optional[str] = None) -> StagedScript:
        """Write ``code`` verbatim to a fresh file in the scripts area.

        The file is flushed and synced before returning so the interpreter
        started right after always sees the complete script.
        """
        submission_id = submission_id or new_submission_id()
        path = self.scripts_dir / f"script_{submission_id}{script_extension}"
        contents = code.encode("utf-8")
        fh = open(path, "xb")
        try:
            with fh:
                fh.write(contents)
                fh.flush()
                os.fsync(fh.fileno())
        except BaseException:
            # a partial script must not outlive a failed stage
            path.unlink(missing_ok=True)
            raise
        logger.debug("Staged %d bytes at %s", len(contents), path)
        return StagedScript(submission_id=submission_id, path=path, contents=contents)

    def artifact_path(self, submission_id: str, output_extension: str) -> Path:
        return self.outputs_dir / f"plot_{submission_id}{output_extension}"

    def release(self, staged: StagedScript) -> None:
        """Delete the staged script.  Failures are logged, never raised."""
        try:
            staged.path.unlink()
        except FileNotFoundError:
            logger.warning("Staged script %s was already gone", staged.path)
        except OSError as exc:
            logger.warning("Unable to remove staged script %s: %s", staged.path, exc)

    def sweep_outputs(self, max_age_seconds: int, now: Optional[float] = None) -> List[Path]:
        """Remove artifacts whose modification time is older than ``max_age_seconds``.

        Returns the paths that were deleted.  A non-positive age disables
        the sweep.
        """
        if max_age_seconds <= 0:
            return []
        cutoff = (now if now is not None else time.time()) - max_age_seconds
        removed: List[Path] = []
        for path in self.outputs_dir.iterdir():
            if not path.is_file():
                continue
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed.append(path)
            except OSError as exc:
                logger.warning("Unable to expire artifact %s: %s", path, exc)
        if removed:
            logger.info("Expired %d artifact(s) older than %ss", len(removed), max_age_seconds)
        return removed
