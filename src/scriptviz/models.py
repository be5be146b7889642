"""Pydantic models for request and response bodies.

The request accepts both the descriptive field names (``sourceLanguage``,
``libraryHint``, ``visualizationKind``) and the short names sent by the
editor front end (``language``, ``library``, ``vizType``).  All fields are
optional at the schema level; the pipeline reports missing ones itself so
the client gets a single, readable error instead of a validation dump.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RunScriptRequest(BaseModel):
    """Request body for executing a visualization script."""

    source_language: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourceLanguage", "language", "source_language"),
        description="Language of the snippet: 'python' or 'r' (case-insensitive).",
    )
    library_hint: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("libraryHint", "library", "library_hint"),
        description="Plotting library the snippet uses. Advisory only.",
    )
    visualization_kind: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("visualizationKind", "vizType", "visualization_kind"),
        description="'static' renders a PNG; 'interactive' or '3d' render HTML.",
    )
    code: Optional[str] = Field(default=None, description="Source code to execute.")

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.source_language:
            missing.append("sourceLanguage")
        if not self.visualization_kind:
            missing.append("visualizationKind")
        if not self.code:
            missing.append("code")
        return missing


class RunScriptResponse(BaseModel):
    """Response body for a successful execution."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Script executed successfully"
    file_url: str = Field(..., alias="fileUrl")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
