"""Visualization script runner.

This package executes plotting snippets submitted by a visual editor.  A
snippet written in Python or R is staged to disk, run with the matching
interpreter and expected to write a PNG image or an HTML document to the
path it receives as its second command-line argument.  The artifact is then
served back under ``/visuals``.

The top-level modules include:

* ``config`` – configuration handling for environment variables.
* ``models`` – Pydantic models defining request and response schemas.
* ``errors`` – the error taxonomy and its HTTP rendering.
* ``policy`` – interpreter and file extension selection.
* ``workspace`` – staging of scripts and allocation of artifact paths.
* ``executor`` – subprocess execution and outcome classification.
* ``publisher`` – static serving of produced artifacts.
* ``pipeline`` – the end-to-end submission flow.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""

from .pipeline import ScriptPipeline  # noqa: F401
