"""
Tests for the preview server (FastAPI TestClient, no real socket).
"""
import pytest
from fastapi.testclient import TestClient

from errors import FilesystemFailure
from preview import create_app


@pytest.fixture
def dist(tmp_path):
    root = tmp_path / "dist"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text('<html><body><script src="./bundle.min.js"></script></body></html>')
    (root / "bundle.min.js").write_text("console.log(1)")
    (root / "assets" / "logo.svg").write_text("<svg/>")
    return root


@pytest.fixture
def client(dist):
    return TestClient(create_app(str(dist)))


def test_index_served_at_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "bundle.min.js" in response.text


def test_static_files_served(client):
    assert client.get("/bundle.min.js").text == "console.log(1)"
    assert client.get("/assets/logo.svg").status_code == 200
    assert client.get("/nope.css").status_code == 404


def test_health(client, dist):
    data = client.get("/api/health").json()
    assert data["status"] == "ok"
    assert data["dist"] == str(dist.resolve())


def test_manifest(client):
    data = client.get("/api/manifest").json()
    assert {"path": "bundle.min.js", "size": 14} in data
    assert {item["path"] for item in data} == {"index.html", "bundle.min.js", "assets/logo.svg"}


def test_missing_index_is_404(dist):
    (dist / "index.html").unlink()
    client = TestClient(create_app(str(dist)))
    assert client.get("/").status_code == 404


def test_missing_dist_refuses_to_start(tmp_path):
    with pytest.raises(FilesystemFailure):
        create_app(str(tmp_path / "dist"))
