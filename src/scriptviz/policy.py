"""Map submission metadata to an execution plan.

The resolver is a pure lookup: the same language and visualization kind
always produce the same :class:`ExecutionPlan`.  It never touches the
filesystem, so a rejected language leaves no trace on disk.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UnsupportedLanguageError

IMAGE_EXTENSION = ".png"
DOCUMENT_EXTENSION = ".html"

# Kinds rendered as an HTML document; every other kind falls back to a PNG.
INTERACTIVE_KINDS = frozenset({"interactive", "3d"})

SUPPORTED_LANGUAGES = ("python", "r")


@dataclass(frozen=True)
class ExecutionPlan:
    interpreter_command: str
    script_extension: str
    output_extension: str


class PolicyResolver:
    """Resolve ``(language, visualization kind)`` pairs to execution plans."""

    def __init__(self, python_command: str = "python3", r_command: str = "Rscript") -> None:
        # R scripts keep the conventional upper-case extension.
        self._languages = {
            "python": (python_command, ".py"),
            "r": (r_command, ".R"),
        }

    def resolve(self, source_language: str, visualization_kind: str) -> ExecutionPlan:
        try:
            command, script_extension = self._languages[source_language.lower()]
        except KeyError:
            raise UnsupportedLanguageError(source_language) from None
        return ExecutionPlan(
            interpreter_command=command,
            script_extension=script_extension,
            output_extension=output_extension_for(visualization_kind),
        )


def output_extension_for(visualization_kind: str) -> str:
    if visualization_kind.lower() in INTERACTIVE_KINDS:
        return DOCUMENT_EXTENSION
    return IMAGE_EXTENSION


_default_resolver = PolicyResolver()


def resolve(source_language: str, visualization_kind: str) -> ExecutionPlan:
    """Resolve with the default interpreter commands."""
    return _default_resolver.resolve(source_language, visualization_kind)
