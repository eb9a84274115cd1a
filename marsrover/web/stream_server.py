# marsrover/web/stream_server.py
import time

from flask import Flask, Response

from marsrover import config
from marsrover.core import renderer

app = Flask(__name__)
state_ref = None
world_ref = None


def gen(max_frames=None):
    delay = 1.0 / max(1, config.STREAM_FPS)
    sent = 0
    while max_frames is None or sent < max_frames:
        with state_ref.lock:
            frame = renderer.render_frame(state_ref, world_ref)
        data = renderer.encode_jpeg(frame)
        yield (b'--frame\r\n'
               b'Content-Type: image/jpeg\r\n\r\n' + data + b'\r\n')
        sent += 1
        time.sleep(delay)


@app.route('/stream')
def stream():
    return Response(gen(),
                    mimetype='multipart/x-mixed-replace; boundary=frame')


@app.route('/snapshot.jpg')
def snapshot():
    with state_ref.lock:
        frame = renderer.render_frame(state_ref, world_ref)
    return Response(renderer.encode_jpeg(frame), mimetype='image/jpeg')


def run_stream(state, world):
    global state_ref, world_ref
    state_ref = state
    world_ref = world
    app.run(host=config.DASHBOARD_HOST, port=config.STREAM_PORT, threaded=True)
