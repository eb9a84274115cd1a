import requests

from marsrover.core import ai_brain
from marsrover.web import stream_server

from test_ai_brain import FakeResponse, reply


def test_pages(client):
    assert client.get("/").status_code == 200
    assert b"Rover Ai" in client.get("/chat").data


def test_state(client):
    data = client.get("/api/state").get_json()
    assert data["mode"] == "ai"
    assert data["connection_status"] == "connected"
    assert data["pending_targets"] == 2


def test_set_mode(client, state):
    assert client.post("/api/set_mode/manual").get_json() == {"ok": True, "mode": "manual"}
    assert not state.ai_enabled
    assert client.get("/api/set_mode/ai").get_json()["mode"] == "ai"
    assert client.post("/api/set_mode/warp").status_code == 400


def test_drive_only_in_manual(client, state):
    assert client.post("/api/drive/forward/press").get_json()["ok"] is False
    client.post("/api/set_mode/manual")
    data = client.post("/api/drive/forward/press").get_json()
    assert data["ok"] is True
    assert data["inputs"]["up"] is True
    assert client.post("/api/drive/forward/release").get_json()["inputs"]["up"] is False
    assert client.post("/api/drive/sideways/press").status_code == 400


def test_estop_and_reset(client, state):
    assert client.post("/api/estop").get_json()["emergency_stop"] is True
    assert client.post("/api/reset").get_json()["emergency_stop"] is False
    msgs = [e["msg"] for e in client.get("/api/logs").get_json()]
    assert msgs[:2] == ["Systems rebooted.", "EMERGENCY STOP TRIGGERED BY USER"]


def test_link_and_science_review(client, state):
    assert client.post("/api/link/lose").get_json()["connection_status"] == "lost"
    assert client.post("/api/science/init-1/accepted").status_code == 409
    assert client.post("/api/link/restore").get_json()["connection_status"] == "connected"

    data = client.post("/api/science/init-1/accepted").get_json()
    assert data["ok"] is True
    assert [t["id"] for t in data["pending"]] == ["init-2"]
    assert client.get("/api/science").get_json()["data_processed"] == 14.25
    assert client.post("/api/science/init-1/rejected").status_code == 404
    assert client.post("/api/science/init-2/maybe").status_code == 400
    assert client.post("/api/science/missing/rejected").status_code == 404


def test_camera_and_vision_toggles(client, state):
    assert client.post("/api/camera").get_json()["camera_view"] == "DRIVER"
    state.detected_objects = [{"id": "x"}]
    assert client.get("/api/detections").get_json()["objects"] == []
    assert client.post("/api/vision").get_json()["vision_mode"] is True
    assert client.get("/api/detections").get_json()["objects"] == [{"id": "x"}]


def test_chat_rejects_other_methods(client):
    resp = client.get("/api/chat")
    assert resp.status_code == 405
    assert resp.get_json() == {"error": "Method not allowed"}


def test_chat_requires_message(client):
    resp = client.post("/api/chat", json={"history": []})
    assert resp.status_code == 400


def test_chat_without_key(client, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    resp = client.post("/api/chat", json={"message": "hi", "history": []})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "API key not configured"}


def test_chat_round_trip(client, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setattr(ai_brain.requests, "post", lambda *a, **kw: FakeResponse(200, reply("Copy that.")))
    resp = client.post("/api/chat", json={"message": "Status?", "history": [{"role": "user", "content": "hi"}]})
    assert resp.status_code == 200
    assert resp.get_json() == {"response": "Copy that."}


def test_chat_upstream_failure(client, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setattr(ai_brain.requests, "post", lambda *a, **kw: FakeResponse(403, {"error": "denied"}))
    resp = client.post("/api/chat", json={"message": "hi", "history": []})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "API request failed"}


def test_chat_network_error(client, monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    def boom(*a, **kw):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(ai_brain.requests, "post", boom)
    resp = client.post("/api/chat", json={"message": "hi", "history": []})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}
    assert "Chat API error:" in capsys.readouterr().out


def test_stream_snapshot(state, world):
    stream_server.state_ref = state
    stream_server.world_ref = world
    with stream_server.app.test_client() as c:
        resp = c.get("/snapshot.jpg")
    assert resp.status_code == 200
    assert resp.mimetype == "image/jpeg"
    assert resp.data[:2] == b"\xff\xd8"

    chunk = next(stream_server.gen(max_frames=1))
    assert chunk.startswith(b"--frame\r\nContent-Type: image/jpeg")
