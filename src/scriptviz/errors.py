"""Exceptions raised by the script pipeline.

Every error that can end a submission derives from :class:`ScriptVizError`
and knows the HTTP status and the JSON body it should be rendered as.  The
API registers a single handler for the base class.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ScriptVizError(Exception):
    """Base class for errors that terminate a submission."""

    status_code = 500

    def __init__(self, error: str, details: Optional[str] = None) -> None:
        super().__init__(error)
        self.error = error
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ScriptVizError):
    """Request is missing required fields."""

    status_code = 400

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing)}.")
        self.missing = missing


class UnsupportedLanguageError(ScriptVizError):
    status_code = 400

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class ExecutionError(ScriptVizError):
    """The interpreter failed to start or exited with a nonzero status."""

    status_code = 500

    def __init__(self, details: Optional[str] = None, error: str = "Execution failed") -> None:
        super().__init__(error, details)


class ExecutionTimeoutError(ExecutionError):
    status_code = 504

    def __init__(self, details: Optional[str] = None) -> None:
        super().__init__(details, error="Execution timed out")


class ArtifactMissingError(ExecutionError):
    """The interpreter exited cleanly but never wrote its artifact."""

    def __init__(self, details: Optional[str] = None) -> None:
        super().__init__(details, error="Artifact missing")
