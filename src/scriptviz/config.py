"""Configuration loader.

The visualization runner reads its configuration from environment variables
so the same image can be used for local development and for a deployed
instance.  Reasonable defaults are provided so that local development works
out of the box.

Environment variables:

``SCRIPTVIZ_SCRIPTS_DIR``
    Directory where submitted code is staged before execution.  Files here
    are deleted as soon as the interpreter exits.  Defaults to
    ``/tmp/scriptviz/scripts``.

``SCRIPTVIZ_OUTPUTS_DIR``
    Directory where interpreters write their artifacts.  Files here are
    served under ``/visuals`` and are kept until a retention sweep removes
    them.  Defaults to ``/tmp/scriptviz/visualizations``.

``SCRIPTVIZ_PUBLIC_URL``
    Base URL used to build absolute artifact links (for example
    ``http://localhost:3001``).  When unset the base URL of the incoming
    request is used.

``SCRIPTVIZ_PYTHON_COMMAND`` / ``SCRIPTVIZ_R_COMMAND``
    Interpreter executables.  Default to ``python3`` and ``Rscript``.  Point
    these at a conda environment if the plotting libraries live there.

``SCRIPTVIZ_MAX_EXECUTION_SECONDS``
    Wall-clock timeout (in seconds) for a single script.  Default is 60.

``SCRIPTVIZ_VERIFY_ARTIFACTS``
    If ``true``, a zero exit status only counts as success when the script
    actually wrote a non-empty artifact.  Defaults to ``true``.

``SCRIPTVIZ_ARTIFACT_MAX_AGE_SECONDS``
    Artifacts older than this are deleted when the service starts.  ``0``
    disables the sweep.  Default is 0.

``SCRIPTVIZ_CORS_ORIGINS``
    Comma-separated list of origins allowed to call the API.  Defaults to
    ``*``.

``SCRIPTVIZ_LOG_LEVEL``
    Level for the ``scriptviz`` logger.  Defaults to ``INFO``.

``PORT``
    The port on which the API server listens.  Defaults to 3001.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y"}


def _int_var(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {val}")


@dataclass
class Config:
    """Centralised configuration object."""

    scripts_dir: str = "/tmp/scriptviz/scripts"
    outputs_dir: str = "/tmp/scriptviz/visualizations"
    public_url: Optional[str] = None
    python_command: str = "python3"
    r_command: str = "Rscript"
    max_execution_seconds: int = 60
    verify_artifacts: bool = True
    artifact_max_age_seconds: int = 0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 3001

    @classmethod
    def load(cls) -> "Config":
        public_url = os.getenv("SCRIPTVIZ_PUBLIC_URL") or None
        if public_url:
            public_url = public_url.rstrip("/")

        max_execution_seconds = _int_var("SCRIPTVIZ_MAX_EXECUTION_SECONDS", 60)
        if max_execution_seconds <= 0:
            raise ValueError(
                f"SCRIPTVIZ_MAX_EXECUTION_SECONDS must be positive, got {max_execution_seconds}"
            )

        cors_env = os.getenv("SCRIPTVIZ_CORS_ORIGINS", "*")
        cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]

        log_level = os.getenv("SCRIPTVIZ_LOG_LEVEL", "INFO").upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid SCRIPTVIZ_LOG_LEVEL: {log_level}. Use one of {', '.join(_LOG_LEVELS)}."
            )

        return cls(
            scripts_dir=os.getenv("SCRIPTVIZ_SCRIPTS_DIR", "/tmp/scriptviz/scripts"),
            outputs_dir=os.getenv("SCRIPTVIZ_OUTPUTS_DIR", "/tmp/scriptviz/visualizations"),
            public_url=public_url,
            python_command=os.getenv("SCRIPTVIZ_PYTHON_COMMAND", "python3"),
            r_command=os.getenv("SCRIPTVIZ_R_COMMAND", "Rscript"),
            max_execution_seconds=max_execution_seconds,
            verify_artifacts=_parse_bool(os.getenv("SCRIPTVIZ_VERIFY_ARTIFACTS"), True),
            artifact_max_age_seconds=_int_var("SCRIPTVIZ_ARTIFACT_MAX_AGE_SECONDS", 0),
            cors_origins=cors_origins,
            log_level=log_level,
            port=_int_var("PORT", 3001),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        It exists to provide a more intuitive name when consumed in
        application code.
        """
        return cls.load()
