from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from scriptviz.api.main import create_app
from scriptviz.config import Config


# Both languages run on the current interpreter so the suite does not need R.
@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        scripts_dir=str(tmp_path / "scripts"),
        outputs_dir=str(tmp_path / "visualizations"),
        public_url="http://testserver",
        python_command=sys.executable,
        r_command=sys.executable,
        max_execution_seconds=10,
    )


@pytest.fixture
def scripts_dir(config: Config) -> Path:
    return Path(config.scripts_dir)


@pytest.fixture
def outputs_dir(config: Config) -> Path:
    return Path(config.outputs_dir)


@pytest.fixture
def client(config: Config):
    with TestClient(create_app(config)) as c:
        yield c
