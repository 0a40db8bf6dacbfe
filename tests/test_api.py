# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from api.deps import get_artifacts_root
from api.main import app


@pytest.fixture
def client(tmp_path):
    app.dependency_overrides[get_artifacts_root] = lambda: str(tmp_path)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_artifact_is_served_from_run_directory(client, tmp_path):
    screens = tmp_path / "run1" / "screens"
    screens.mkdir(parents=True)
    (screens / "home_annotated.png").write_bytes(b"png-bytes")

    resp = client.get("/api/runs/run1/artifacts/screens/home_annotated.png")
    assert resp.status_code == 200
    assert resp.content == b"png-bytes"


def test_missing_artifact_and_unknown_run_are_404(client, tmp_path):
    (tmp_path / "run1").mkdir()
    assert client.get("/api/runs/run1/artifacts/nope.xlsx").status_code == 404
    assert client.get("/api/runs/other/artifacts/nope.xlsx").status_code == 404


def test_paths_outside_run_directory_are_rejected(client, tmp_path):
    (tmp_path / "run1").mkdir()
    (tmp_path / "secret.txt").write_text("x")
    assert client.get("/api/runs/run1/artifacts/..%2Fsecret.txt").status_code == 404


def test_invalid_config_is_400(client, tmp_path):
    resp = client.post("/api/spec-sheets", json={"config_path": str(tmp_path / "missing.json")})
    assert resp.status_code == 400
    assert "not found" in resp.json()["detail"]
