"""The script-execution pipeline.

``submit`` runs one submission from validation to cleanup::

    validate -> resolve plan -> stage script -> run interpreter -> release script

Validation and policy errors are raised before anything is written to disk.
Once a script is staged it is released in a ``finally`` block, whatever the
interpreter did.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import Config
from .errors import ValidationError
from .executor import ExecutionResult, ScriptRunner
from .models import RunScriptRequest
from .policy import PolicyResolver
from .publisher import ArtifactPublisher
from .workspace import WorkspaceManager

logger = logging.getLogger(__name__)


class ScriptPipeline:
    def __init__(
        self,
        resolver: PolicyResolver,
        workspace: WorkspaceManager,
        runner: ScriptRunner,
    ) -> None:
        self.resolver = resolver
        self.workspace = workspace
        self.runner = runner

    @classmethod
    def from_config(cls, config: Config) -> "ScriptPipeline":
        publisher = ArtifactPublisher(config.outputs_dir, public_url=config.public_url)
        return cls(
            resolver=PolicyResolver(python_command=config.python_command, r_command=config.r_command),
            workspace=WorkspaceManager(config.scripts_dir, config.outputs_dir),
            runner=ScriptRunner(
                publisher,
                timeout=config.max_execution_seconds,
                verify_artifacts=config.verify_artifacts,
            ),
        )

    @property
    def publisher(self) -> ArtifactPublisher:
        return self.runner.publisher

    def submit(self, request: RunScriptRequest, base_url: Optional[str] = None) -> ExecutionResult:
        """Execute one submission and return its classified result.

        Raises :class:`~scriptviz.errors.ValidationError` or
        :class:`~scriptviz.errors.UnsupportedLanguageError` before staging.
        Execution failures are returned, not raised; use
        :meth:`ExecutionResult.raise_for_failure` to turn them into errors.
        """
        missing = request.missing_fields()
        if missing:
            raise ValidationError(missing)

        plan = self.resolver.resolve(request.source_language, request.visualization_kind)

        staged = self.workspace.stage(request.code, plan.script_extension)
        artifact_path = self.workspace.artifact_path(staged.submission_id, plan.output_extension)
        logger.info(
            "Submission %s: language=%s library=%s kind=%s -> %s",
            staged.submission_id,
            request.source_language,
            request.library_hint,
            request.visualization_kind,
            artifact_path.name,
        )
        try:
            return self.runner.run(plan, staged, artifact_path, base_url=base_url)
        finally:
            self.workspace.release(staged)
