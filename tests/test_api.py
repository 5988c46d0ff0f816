import json

import pytest
from fastapi.testclient import TestClient

from slidefit.api.app import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("PPTX_OUTPUT_DIR", str(tmp_path))
    return TestClient(app)


DECK = {
    "slides": [
        {"layout": "title-only", "title": "Queues"},
        {
            "layout": "title-content",
            "title": "Backpressure",
            "content": [{"type": "bullets", "items": [f"item {i}" for i in range(9)]}],
        },
    ]
}


def test_health(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_decode_paginates(client):
    response = client.post("/slides/decode", json={"raw": json.dumps(DECK)})
    assert response.status_code == 200
    data = response.json()
    assert data["slide_count"] == len(data["slides"]) == 2
    assert [len(b["items"]) for b in data["slides"][1]["content"]] == [6, 3]


def test_decode_without_pagination(client):
    response = client.post("/slides/decode", json={"raw": json.dumps(DECK), "paginate": False})
    data = response.json()
    assert data["slides"][1]["content"][0]["items"] == [f"item {i}" for i in range(9)]


def test_decode_error_is_422(client):
    response = client.post("/slides/decode", json={"raw": '{"slides": []}'})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "EMPTY_PRESENTATION"
    assert "error" in data


def test_decode_strict_schema_error(client):
    response = client.post("/slides/decode", json={"raw": json.dumps(DECK), "strict": True})
    assert response.status_code == 422
    assert response.json()["code"] == "SCHEMA_VIOLATION"


def test_decode_requires_raw(client):
    assert client.post("/slides/decode", json={}).status_code == 422


def test_pptx_from_presentation(client, tmp_path):
    response = client.post("/slides/pptx", json={"presentation": DECK, "filename": "queues"})
    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "queues.pptx"
    assert data["slide_count"] == 2
    assert data["size_bytes"] > 0
    assert (tmp_path / "queues.pptx").exists()


def test_pptx_download(client):
    response = client.post("/slides/pptx?download=1", json={"raw": json.dumps(DECK)})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.presentationml.presentation"
    )
    assert response.content[:2] == b"PK"


def test_pptx_requires_input(client):
    assert client.post("/slides/pptx", json={"filename": "x"}).status_code == 422


def test_pptx_decode_error(client):
    response = client.post("/slides/pptx", json={"raw": "no deck here"})
    assert response.status_code == 422
    assert response.json()["code"] == "UNPARSEABLE"
