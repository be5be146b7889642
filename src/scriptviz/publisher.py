"""Expose produced artifacts over HTTP.

The outputs area is mounted read-only under a fixed prefix.  Starlette's
``StaticFiles`` only answers ``GET`` and ``HEAD`` and infers the content type
from the file extension, which is all the contract requires.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

VISUALS_PREFIX = "/visuals"


class ArtifactPublisher:
    def __init__(self, outputs_dir: str | Path, public_url: Optional[str] = None, prefix: str = VISUALS_PREFIX) -> None:
        self.outputs_dir = Path(outputs_dir)
        self.public_url = public_url.rstrip("/") if public_url else None
        self.prefix = prefix

    def url_for(self, artifact_path: Path, base_url: Optional[str] = None) -> str:
        """Return the absolute URL an artifact will be served from.

        ``public_url`` from the configuration wins over ``base_url`` (the
        base URL of the current request).  With neither available the URL
        is relative to the server root.
        """
        base = self.public_url or (base_url.rstrip("/") if base_url else "")
        return f"{base}{self.prefix}/{Path(artifact_path).name}"

    def mount(self, app: FastAPI) -> None:
        app.mount(self.prefix, StaticFiles(directory=str(self.outputs_dir)), name="visuals")
