# marsrover/web/dashboard_server.py
import os

from flask import Flask, jsonify, request, send_from_directory

from marsrover import config
from marsrover.core import ai_brain, motor_control, science
from marsrover.core.state_manager import RoverState

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

app = Flask(__name__, static_folder=STATIC_DIR, static_url_path="/static")
state_ref: RoverState = None  # will be set by main process


@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({"error": "Method not allowed"}), 405


@app.route("/")
def index():
    return send_from_directory(STATIC_DIR, "index.html")


@app.route("/chat")
def chat_page():
    return send_from_directory(STATIC_DIR, "chat.html")


@app.route("/api/state")
def api_state():
    s = state_ref
    with s.lock:
        return jsonify(s.snapshot())


@app.route("/api/logs")
def api_logs():
    s = state_ref
    with s.lock:
        return jsonify(s.log.to_list())


@app.route("/api/detections")
def api_detections():
    s = state_ref
    with s.lock:
        objects = list(s.detected_objects) if s.vision_mode else []
        return jsonify({"vision_mode": s.vision_mode, "objects": objects})


@app.route("/api/science")
def api_science():
    s = state_ref
    with s.lock:
        return jsonify({
            "pending": science.pending(s),
            "bandwidth_saved": s.bandwidth_saved,
            "data_processed": s.data_processed,
        })


@app.route("/api/science/<target_id>/<action>", methods=["POST"])
def api_science_review(target_id, action):
    s = state_ref
    with s.lock:
        try:
            ok = science.review(s, target_id, action)
        except ValueError:
            return jsonify({"ok": False}), 400
        if not ok:
            return jsonify({"ok": False}), 409 if s.link_lost else 404
        return jsonify({"ok": True, "pending": science.pending(s)})


@app.route("/api/set_mode/<mode>", methods=["GET", "POST"])
def api_set_mode(mode):
    s = state_ref
    with s.lock:
        try:
            s.set_mode(mode)
        except ValueError:
            return jsonify({"ok": False, "mode": s.mode}), 400
        return jsonify({"ok": True, "mode": s.mode})


@app.route("/api/drive/<direction>/<action>", methods=["POST"])
def api_drive(direction, action):
    s = state_ref
    with s.lock:
        try:
            accepted = motor_control.command(s, direction, action)
        except ValueError:
            return jsonify({"ok": False}), 400
        return jsonify({"ok": accepted, "inputs": dict(s.inputs)})


@app.route("/api/estop", methods=["POST"])
def api_estop():
    s = state_ref
    with s.lock:
        s.trigger_emergency_stop()
        return jsonify({"ok": True, "emergency_stop": s.emergency_stop})


@app.route("/api/reset", methods=["POST"])
def api_reset():
    s = state_ref
    with s.lock:
        s.reset_emergency_stop()
        return jsonify({"ok": True, "emergency_stop": s.emergency_stop})


@app.route("/api/link/lose", methods=["POST"])
def api_link_lose():
    s = state_ref
    with s.lock:
        s.lose_link()
        return jsonify({"ok": True, "connection_status": s.connection_status})


@app.route("/api/link/restore", methods=["POST"])
def api_link_restore():
    s = state_ref
    with s.lock:
        s.restore_link()
        return jsonify({"ok": True, "connection_status": s.connection_status})


@app.route("/api/camera", methods=["POST"])
def api_camera():
    s = state_ref
    with s.lock:
        return jsonify({"ok": True, "camera_view": s.toggle_camera()})


@app.route("/api/vision", methods=["POST"])
def api_vision():
    s = state_ref
    with s.lock:
        return jsonify({"ok": True, "vision_mode": s.toggle_vision()})


@app.route("/api/chat", methods=["POST"])
def api_chat():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    message = body.get("message")
    history = body.get("history") or []
    if not isinstance(message, str) or not message.strip():
        return jsonify({"error": "Message is required"}), 400

    try:
        reply = ai_brain.ask_gemini(message, history)
    except ai_brain.ChatError as e:
        return jsonify({"error": e.message}), e.status
    except Exception as e:
        print("Chat API error:", e)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"response": reply})


def run_dashboard(state):
    global state_ref
    state_ref = state
    app.run(host=config.DASHBOARD_HOST, port=config.DASHBOARD_PORT, threaded=True)
