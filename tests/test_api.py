"""
API tests for the visualization runner.

These tests exercise the HTTP endpoints using FastAPI's TestClient.  They
verify the request/response contract of ``/run-script``, artifact
retrieval under ``/visuals`` and the health check.
"""

from __future__ import annotations

import os
import time

from fastapi.testclient import TestClient

from scriptviz.api.main import create_app


WRITE_HTML = """
import sys
with open(sys.argv[1], "w") as f:
    f.write("<html><body>interactive</body></html>")
"""

WRITE_PNG = """
import sys
with open(sys.argv[1], "wb") as f:
    f.write(b"\\x89PNG\\r\\n\\x1a\\n" + b"\\x00" * 16)
"""


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_run_script_interactive(client, scripts_dir):
    payload = {"language": "python", "library": "Plotly", "vizType": "Interactive", "code": WRITE_HTML}
    response = client.post("/run-script", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Script executed successfully"
    assert data["fileUrl"].startswith("http://testserver/visuals/plot_")
    assert data["fileUrl"].endswith(".html")
    assert list(scripts_dir.iterdir()) == []

    # Fetch the artifact through the static mount
    path = data["fileUrl"][len("http://testserver"):]
    artifact = client.get(path)
    assert artifact.status_code == 200
    assert artifact.headers["content-type"].startswith("text/html")
    assert artifact.content == b"<html><body>interactive</body></html>"


def test_run_script_static_png(client, scripts_dir):
    payload = {"sourceLanguage": "Python", "libraryHint": "Matplotlib", "visualizationKind": "Static", "code": WRITE_PNG}
    response = client.post("/run-script", json=payload)
    assert response.status_code == 200
    url = response.json()["fileUrl"]
    assert url.endswith(".png")
    artifact = client.get(url[len("http://testserver"):])
    assert artifact.headers["content-type"] == "image/png"
    assert artifact.content == b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
    assert list(scripts_dir.iterdir()) == []


def test_run_script_missing_fields(client, scripts_dir, outputs_dir):
    response = client.post("/run-script", json={"language": "python", "vizType": "Static"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: code."}
    assert list(scripts_dir.iterdir()) == []
    assert list(outputs_dir.iterdir()) == []


def test_run_script_unsupported_language(client):
    response = client.post("/run-script", json={"language": "julia", "vizType": "Static", "code": "1"})
    assert response.status_code == 400
    assert response.json() == {"error": "Unsupported language: julia"}


def test_run_script_execution_failure(client, scripts_dir):
    code = "import sys\nsys.stderr.write('Error: could not find function \"ggplot\"')\nsys.exit(1)\n"
    response = client.post("/run-script", json={"language": "r", "vizType": "Static", "code": code})
    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Execution failed"
    assert 'could not find function "ggplot"' in data["details"]
    assert list(scripts_dir.iterdir()) == []


def test_run_script_artifact_missing(client):
    response = client.post("/run-script", json={"language": "python", "vizType": "3D", "code": "print('hi')"})
    assert response.status_code == 500
    assert response.json()["error"] == "Artifact missing"


def test_run_script_timeout(config):
    config.max_execution_seconds = 1
    with TestClient(create_app(config)) as client:
        response = client.post(
            "/run-script",
            json={"language": "python", "vizType": "static", "code": "import time\ntime.sleep(30)\n"},
        )
    assert response.status_code == 504
    assert response.json()["error"] == "Execution timed out"


def test_visuals_is_read_only(client):
    response = client.post("/visuals/plot_x.png", content=b"data")
    assert response.status_code == 405


def test_unknown_artifact_is_404(client):
    assert client.get("/visuals/plot_missing.png").status_code == 404


def test_startup_sweeps_old_artifacts(config, outputs_dir):
    config.artifact_max_age_seconds = 60
    app = create_app(config)
    stale = outputs_dir / "plot_stale.png"
    stale.write_bytes(b"old")
    past = time.time() - 3600
    os.utime(stale, (past, past))

    with TestClient(app):
        pass

    assert not stale.exists()


def test_run_script_with_undecodable_output(client):
    code = WRITE_PNG + "sys.stdout.buffer.write(b'\\xff\\xfe')\n"
    response = client.post("/run-script", json={"language": "python", "vizType": "static", "code": code})
    assert response.status_code == 200
    assert response.json()["fileUrl"].endswith(".png")


def test_run_script_latin1_diagnostics(client, scripts_dir):
    code = "import sys\nsys.stderr.buffer.write(b'Fehler \\xe4 in plot')\nsys.exit(1)\n"
    response = client.post("/run-script", json={"language": "r", "vizType": "Static", "code": code})
    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Execution failed"
    assert "Fehler" in data["details"]
    assert list(scripts_dir.iterdir()) == []
