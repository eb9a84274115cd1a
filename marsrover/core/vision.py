# marsrover/core/vision.py
import math
import time

import cv2
import numpy as np

from marsrover.core import alerts, terrain
from marsrover.core.world import HAZARD

FRAME_WIDTH = 1280
FRAME_HEIGHT = 720
FOV_DEG = 60.0

DETECT_RANGE = 25.0
FRAME_MARGIN = 0.9
LOG_INTERVAL = 5.0

ORBIT_OFFSET = (0.0, 4.0, 8.0)
DRIVER_OFFSET = (0.0, 2.2, -0.5)
DRIVER_LOOK = (0.0, 1.5, -10.0)


def rotate_y(v, angle):
    x, y, z = v
    c, s = math.cos(angle), math.sin(angle)
    return (x * c + z * s, y, -x * s + z * c)


def _add(a, b):
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def update_camera(state):
    x, z = state.position
    ground = (x, terrain.height(x, z), z)
    rover = (x, ground[1] + 0.6, z)

    if state.camera_view == "DRIVER":
        state.camera = {
            "position": _add(ground, rotate_y(DRIVER_OFFSET, state.heading)),
            "look_at": _add(ground, rotate_y(DRIVER_LOOK, state.heading)),
        }
        return state.camera

    orbit = 0.0
    if state.telemetry["ai_state"] in ("ANALYZING", "IDLE"):
        orbit = state.frame_count * 0.002
    target = _add(ground, rotate_y(ORBIT_OFFSET, state.heading + orbit))
    cur = state.camera["position"]
    pos = tuple(c + (t - c) * 0.05 for c, t in zip(cur, target))
    state.camera = {"position": pos, "look_at": rover}
    return state.camera


def camera_matrix(width=FRAME_WIDTH, height=FRAME_HEIGHT, fov_deg=FOV_DEG):
    f = (height / 2.0) / math.tan(math.radians(fov_deg) / 2.0)
    return np.array([[f, 0, width / 2.0], [0, f, height / 2.0], [0, 0, 1]], dtype=np.float64)


def camera_pose(eye, look_at):
    """World-to-camera rotation and translation in OpenCV axes (x right, y down, z forward)."""
    eye = np.asarray(eye, dtype=np.float64)
    fwd = np.asarray(look_at, dtype=np.float64) - eye
    fwd /= np.linalg.norm(fwd)
    right = np.cross(fwd, [0.0, 1.0, 0.0])
    right /= np.linalg.norm(right)
    up = np.cross(right, fwd)
    rot = np.vstack([right, -up, fwd])
    return rot, -rot @ eye


def project(camera, points):
    """Project world points; returns (pixels Nx2, depths N)."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(pts) == 0:
        return np.zeros((0, 2)), np.zeros(0)
    rot, tvec = camera_pose(camera["position"], camera["look_at"])
    rvec, _ = cv2.Rodrigues(rot)
    pixels, _ = cv2.projectPoints(pts, rvec, tvec, camera_matrix(), None)
    depths = (pts @ rot.T + tvec)[:, 2]
    return pixels.reshape(-1, 2), depths


def detect(state, world):
    x, z = state.position
    near = [o for o in world.objects if o.visible and o.distance_to(x, z) < DETECT_RANGE]
    if not near:
        return []

    pixels, depths = project(state.camera, [o.position for o in near])
    cx, cy = FRAME_WIDTH / 2.0, FRAME_HEIGHT / 2.0
    found = []
    for obj, (u, v), depth in zip(near, pixels, depths):
        if depth <= 0:
            continue
        nx = (u - cx) / cx
        ny = (cy - v) / cy
        if abs(nx) >= FRAME_MARGIN or abs(ny) >= FRAME_MARGIN:
            continue
        found.append({
            "id": obj.uuid,
            "x": (nx * 0.5 + 0.5) * 100,
            "y": (-ny * 0.5 + 0.5) * 100,
            "type": obj.type or "MINERAL",
            "dist": f"{obj.distance_to(x, z):.1f}",
            "position": [round(c, 3) for c in obj.position],
        })
    return found


def update(state, world, now=None):
    now = time.time() if now is None else now
    visible = detect(state, world)
    state.detected_objects = visible

    if state.camera_view != "DRIVER" or not visible:
        return visible
    if now - state.last_vision_log <= LOG_INTERVAL:
        return visible

    priority = next((o for o in visible if o["type"] != HAZARD), visible[0])
    px, py, pz = priority["position"]
    log_type = alerts.WARNING if priority["type"] == HAZARD else alerts.NOMINAL
    state.log.add(f"NAV-CAM: {priority['type']} at [{px:.1f}, {py:.1f}, {pz:.1f}]", log_type)
    state.last_vision_log = now
    return visible
