# marsrover/core/renderer.py
# Top-down map of the rover's surroundings, drawn with OpenCV.
import math

import cv2
import numpy as np

from marsrover.core import terrain

VIEW_SIZE = 480
VIEW_SPAN = 60.0  # world units across the frame
SCALE = VIEW_SIZE / VIEW_SPAN
HEIGHT_RANGE = (-2.5, 2.5)

HAZARD_BGR = (68, 68, 239)
SCIENCE_BGR = (212, 182, 6)
ROVER_BGR = (240, 232, 226)
SLOPE_BGR = (255, 0, 255)
TEXT_BGR = (235, 235, 235)


def hex_to_bgr(value):
    return (value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF)


def to_pixel(center, x, z):
    return (
        int(round((x - center[0]) * SCALE + VIEW_SIZE / 2)),
        int(round((z - center[1]) * SCALE + VIEW_SIZE / 2)),
    )


def terrain_layer(center):
    grid = terrain.height_grid(center[0], center[1], size=VIEW_SPAN, res=120)
    lo, hi = HEIGHT_RANGE
    norm = np.clip((grid - lo) / (hi - lo), 0.0, 1.0)
    img = (norm * 255).astype(np.uint8)
    img = cv2.resize(img, (VIEW_SIZE, VIEW_SIZE), interpolation=cv2.INTER_LINEAR)
    return cv2.applyColorMap(img, cv2.COLORMAP_INFERNO)


def render_frame(state, world):
    center = (state.position[0], state.position[1])
    frame = terrain_layer(center)

    for obs in world.hazards:
        if obs.visible:
            radius = max(2, int(obs.size * SCALE))
            cv2.circle(frame, to_pixel(center, obs.position[0], obs.position[2]), radius, HAZARD_BGR, 1, cv2.LINE_AA)

    for sci in world.science:
        if sci.visible:
            p = to_pixel(center, sci.position[0], sci.position[2])
            cv2.drawMarker(frame, p, SCIENCE_BGR, cv2.MARKER_DIAMOND, 10, 2)

    if state.lidar["visible"] and state.lidar["end"] is not None:
        start = to_pixel(center, state.lidar["start"][0], state.lidar["start"][2])
        end = to_pixel(center, state.lidar["end"][0], state.lidar["end"][2])
        cv2.line(frame, start, end, hex_to_bgr(state.lidar["color"]), 2, cv2.LINE_AA)

    if state.slope_line["visible"]:
        start = to_pixel(center, state.slope_line["start"][0], state.slope_line["start"][2])
        end = to_pixel(center, state.slope_line["end"][0], state.slope_line["end"][2])
        cv2.line(frame, start, end, SLOPE_BGR, 2, cv2.LINE_AA)

    _draw_rover(frame, state.heading)

    t = state.telemetry
    cv2.putText(frame, f"AI STATUS: {t['ai_state']}", (10, 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_BGR, 1, cv2.LINE_AA)
    cv2.putText(frame, f"SPD {t['speed']:.2f}  PITCH {t['pitch']}  ROLL {t['roll']}", (10, 40),
                cv2.FONT_HERSHEY_SIMPLEX, 0.45, TEXT_BGR, 1, cv2.LINE_AA)
    if state.emergency_stop:
        cv2.putText(frame, "EMERGENCY STOP", (VIEW_SIZE // 2 - 95, VIEW_SIZE // 2 - 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, HAZARD_BGR, 2, cv2.LINE_AA)
    return frame


def _draw_rover(frame, heading):
    c = VIEW_SIZE / 2
    fx, fz = -math.sin(heading), -math.cos(heading)
    rx, rz = -fz, fx
    tip = (c + fx * 14, c + fz * 14)
    left = (c - fx * 8 + rx * 7, c - fz * 8 + rz * 7)
    right = (c - fx * 8 - rx * 7, c - fz * 8 - rz * 7)
    pts = np.array([tip, left, right], dtype=np.int32)
    cv2.fillPoly(frame, [pts], ROVER_BGR, cv2.LINE_AA)


def encode_jpeg(frame, quality=80):
    ok, jpeg = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not ok:
        raise RuntimeError("JPEG encoding failed")
    return jpeg.tobytes()
