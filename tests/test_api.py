import io
import json

import pytest
from fastapi.testclient import TestClient
from pptx import Presentation

from slidemaker.core.config import Settings
from slidemaker.kernel.errors import SynthesisUnavailable
from slidemaker.kernel.history import DeckHistory
from slidemaker.main import create_app

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


class FakeSynth:
    def __init__(self, response: str):
        self.response = response
        self.error = None
        self.keys = []

    def factory(self, api_key):
        self.keys.append(api_key)

        def synthesize(content, policy):
            if self.error is not None:
                raise self.error
            if self.response is None:
                raise SynthesisUnavailable()
            return self.response
        return synthesize


@pytest.fixture
def synth():
    return FakeSynth(json.dumps([
        {"title": "Cells", "bullets": ["unit of life"], "speakerNotes": "intro"},
        {"bullets": "broken"},
    ]))


@pytest.fixture
def client(synth):
    app = create_app(
        settings=Settings(_env_file=None),
        history=DeckHistory(capacity=20),
        synthesizer_factory=synth.factory,
    )
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json()["ok"] is True


def test_extract_text_plain(client):
    r = client.post("/api/extract-text", files={"file": ("notes.txt", b"  Osmosis moves water.  ", "text/plain")})
    assert r.status_code == 200
    assert r.json() == {"text": "Osmosis moves water.", "sourceFormat": "plain", "fileName": "notes.txt"}


def test_extract_text_pptx(client, pptx_bytes):
    r = client.post("/api/extract-text", files={"file": ("deck.pptx", pptx_bytes, PPTX_MIME)})
    assert r.status_code == 200
    assert r.json()["sourceFormat"] == "presentation"
    assert "Photosynthesis" in r.json()["text"]


def test_extract_text_unsupported(client):
    r = client.post("/api/extract-text", files={"file": ("photo.png", b"\x89PNG", "image/png")})
    assert r.status_code == 415
    body = r.json()
    assert body["code"] == "E_UNSUPPORTED_FORMAT"
    assert "image/png" in body["error"]


def test_extract_text_decoder_fault(client):
    r = client.post("/api/extract-text", files={"file": ("x.pdf", b"not a pdf", "application/pdf")})
    assert r.status_code == 422
    assert r.json()["code"] == "E_EXTRACTION"
    assert "Traceback" not in r.text


def test_generate_slides(client, synth):
    r = client.post("/api/generate-slides", json={"content": "cells...", "apiKey": "k-123"})
    assert r.status_code == 200
    body = r.json()
    assert body["slides"] == [
        {"title": "Cells", "bullets": ["unit of life"], "speakerNotes": "intro"},
        {"title": "Slide 2", "bullets": [], "speakerNotes": ""},
    ]
    assert synth.keys == ["k-123"]

    hist = client.get("/api/history").json()
    assert hist["count"] == 1 and hist["capacity"] == 20
    assert hist["items"][0]["id"] == body["id"]


def test_generate_slides_requires_content(client):
    r = client.post("/api/generate-slides", json={"content": "   "})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required field: content"


def test_generate_slides_bad_envelope(client, synth):
    synth.response = '{"title": "not an array"}'
    r = client.post("/api/generate-slides", json={"content": "x"})
    assert r.status_code == 502
    assert r.json()["code"] == "E_SYNTHESIS_ENVELOPE"
    assert client.get("/api/history").json()["count"] == 0


def test_generate_slides_empty_deck(client, synth):
    synth.response = "```json\n[]\n```"
    r = client.post("/api/generate-slides", json={"content": "x"})
    assert r.status_code == 422
    assert r.json()["code"] == "E_EMPTY_DECK"


def test_generate_slides_without_key(client, synth):
    synth.response = None
    r = client.post("/api/generate-slides", json={"content": "x"})
    assert r.status_code == 401
    assert r.json()["code"] == "E_SYNTHESIS_UNAVAILABLE"


def test_download_pptx(client):
    payload = {
        "presentationTitle": "Bio 101: Ch. 3!",
        "theme": "light",
        "slides": [{"title": "A", "bullets": ["x"], "speakerNotes": "n"}, {"title": "B", "bullets": []}],
    }
    r = client.post("/api/download-pptx", json=payload)
    assert r.status_code == 200
    assert r.headers["content-type"] == PPTX_MIME
    assert r.headers["content-disposition"] == 'attachment; filename="Bio_101__Ch__3_.pptx"'
    prs = Presentation(io.BytesIO(r.content))
    assert len(prs.slides) == 3


def test_download_pptx_requires_slides(client):
    r = client.post("/api/download-pptx", json={"slides": []})
    assert r.status_code == 400


def test_delete_history_entry(client):
    entry_id = client.post("/api/generate-slides", json={"content": "x"}).json()["id"]
    assert client.delete(f"/api/history/{entry_id}").json() == {"ok": True, "id": entry_id}
    assert client.delete(f"/api/history/{entry_id}").status_code == 404
    assert client.get("/api/history").json()["count"] == 0


def test_generate_slides_provider_fault_is_json_problem(client, synth):
    synth.error = RuntimeError("Incorrect API key provided")
    r = client.post("/api/generate-slides", json={"content": "x"})
    assert r.status_code == 502
    assert r.headers["content-type"].startswith("application/json")
    assert r.json()["code"] == "E_SYNTHESIS"
    assert "Incorrect API key" not in r.text
    assert client.get("/api/history").json()["count"] == 0


def test_generate_slides_rejects_inverted_bullet_range(client):
    r = client.post("/api/generate-slides", json={"content": "x", "policy": {"min_bullets": 5, "max_bullets": 2}})
    assert r.status_code == 422


def test_app_title_and_theme_come_from_settings(synth):
    app = create_app(
        settings=Settings(_env_file=None, APP_NAME="decks", DEFAULT_THEME="LIGHT"),
        history=DeckHistory(),
        synthesizer_factory=synth.factory,
    )
    assert app.title == "decks"
    r = TestClient(app).post("/api/generate-slides", json={"content": "x"})
    assert app.state.history.get(r.json()["id"]).theme.value == "light"


def test_request_metrics_use_route_template(client):
    from prometheus_client import REGISTRY

    labels = {"route": "/api/history/{entry_id}", "method": "DELETE", "status": "404"}
    before = REGISTRY.get_sample_value("slidemaker_http_requests_total", labels) or 0
    client.delete("/api/history/missing-1")
    client.delete("/api/history/missing-2")
    assert REGISTRY.get_sample_value("slidemaker_http_requests_total", labels) == before + 2
