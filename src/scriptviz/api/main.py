"""
FastAPI application for the visualization runner.

This module configures the FastAPI application, registers the script
execution route, mounts the outputs directory for artifact retrieval and
maps pipeline errors to JSON responses.  The request/response contract is
the one used by the editor front end::

    POST /run-script   {language, library, vizType, code}
        -> 200 {"message": "Script executed successfully", "fileUrl": ...}
        -> 4xx/5xx {"error": ..., "details": ...}
    GET  /visuals/<file>
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Config
from ..errors import ScriptVizError
from ..models import ErrorResponse, RunScriptRequest, RunScriptResponse
from ..pipeline import ScriptPipeline


logger = logging.getLogger("scriptviz")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[scriptviz] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the application for ``config`` (read from the environment if omitted)."""
    config = config or Config.from_env()
    logger.setLevel(config.log_level)

    logger.info(
        "Loaded config: scripts_dir=%s, outputs_dir=%s, python=%s, r=%s, max_exec=%s, verify_artifacts=%s",
        config.scripts_dir,
        config.outputs_dir,
        config.python_command,
        config.r_command,
        config.max_execution_seconds,
        config.verify_artifacts,
    )

    pipeline = ScriptPipeline.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.artifact_max_age_seconds > 0:
            pipeline.workspace.sweep_outputs(config.artifact_max_age_seconds)
        yield

    app = FastAPI(title="Visualization Script Runner", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        path = request.url.path
        method = request.method
        client = getattr(request.client, "host", "unknown")
        logger.info("Incoming request: %s %s from %s", method, path, client)
        response = await call_next(request)
        logger.info("Response: %s %s -> %s", method, path, response.status_code)
        return response

    @app.exception_handler(ScriptVizError)
    async def handle_pipeline_error(request: Request, exc: ScriptVizError) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health")
    async def health() -> Dict[str, str]:
        """Return a simple health check response."""
        return {"status": "ok"}

    @app.post(
        "/run-script",
        response_model=RunScriptResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
    )
    def run_script(req: RunScriptRequest, request: Request) -> RunScriptResponse:
        """Execute a submitted script and return the URL of its artifact.

        Declared without ``async`` so each request waits for its
        interpreter in the server's thread pool.
        """
        logger.info(
            "Received /run-script with: language=%s, library=%s, vizType=%s",
            req.source_language,
            req.library_hint,
            req.visualization_kind,
        )
        try:
            result = pipeline.submit(req, base_url=str(request.base_url))
        except ScriptVizError:
            raise
        except Exception as exc:
            logger.exception("[/run-script] Unhandled error during execution: %s", exc)
            raise ScriptVizError("Internal server error") from exc

        result.raise_for_failure()
        return RunScriptResponse(file_url=result.artifact_url)

    pipeline.publisher.mount(app)
    return app


config = Config.from_env()
app = create_app(config)
