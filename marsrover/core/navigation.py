# marsrover/core/navigation.py
# Per-frame rover control: stuck recovery, manual drive, and the AI
# decision tree (hazard/slope avoidance, target approach, exploring),
# followed by the science scan and the physics integration.
import math
import random

from marsrover.core import motor_control, science, sensors, terrain, vision

AI_CRUISE_SPEED = 0.02
SCAN_FRAMES = 240
SCAN_TRIGGER_DIST = 5.0
SCAN_ABORT_DIST = 6.0
APPROACH_DIST = 30.0
APPROACH_STOP_DIST = 2.0
AVOID_DIST = 5.0
CRITICAL_DIST = 1.5
AHEAD_DOT = 0.9  # ~25 degree cone

STUCK_RECOVER = 120
STUCK_RESET = 240
STUCK_REPORT = 60

COLOR_RED = 0xEF4444
COLOR_AMBER = 0xF59E0B
COLOR_GREEN = 0x10B981
COLOR_CYAN = 0x06B6D4


def _rover_point(state, lift=0.6):
    x, z = state.position
    return (x, terrain.height(x, z) + lift, z)


def _show_lidar(state, end, color, start=None):
    state.lidar = {
        "visible": True,
        "color": color,
        "start": start or _rover_point(state),
        "end": tuple(end),
    }


def _hide_lidar(state):
    state.lidar = dict(state.lidar, visible=False)


def _angle_to(state, point):
    # bearing in heading terms: heading h drives along (-sin h, -cos h)
    x, z = state.position
    return math.atan2(x - point[0], z - point[2])


def detect_stuck(state):
    if abs(state.target_speed) > 0.005 and abs(state.sim_speed) < 0.001:
        state.stuck_timer += 1
    else:
        state.stuck_timer = max(0, state.stuck_timer - 1)


def update_scan_trigger(state, passive, passive_dist, rng=random):
    x, z = state.position
    if passive is not None and passive_dist < SCAN_TRIGGER_DIST and state.scan_timer == 0 and state.current_target is None:
        state.current_target = passive
        state.scan_timer = SCAN_FRAMES
        state.scan_progress = 0.0
        state.analysis_data = {
            "type": passive.type,
            "confidence": 75,
            "spectroscopy": [rng.randrange(100) for _ in range(10)],
        }
    elif state.scan_timer > 0 and state.current_target is not None and state.current_target.distance_to(x, z) > SCAN_ABORT_DIST:
        state.scan_timer = 0
        state.current_target = None
        state.scan_progress = 0.0
        state.analysis_data = None


def step_recovering(state):
    state.target_speed = -0.02
    state.target_rot += 0.03
    if state.stuck_timer > STUCK_RESET:
        state.stuck_timer = 0
    return "RECOVERING (STUCK)"


def step_halted(state):
    state.target_speed = 0.0
    state.sim_speed = 0.0
    return "IDLE"


def step_manual(state):
    speed, rot = motor_control.manual_targets(state)
    state.target_speed = speed
    state.target_rot += rot
    return "MANUAL"


def _avoid(state, hazard_pos, hazard_clear, slope_detected):
    _show_lidar(state, hazard_pos, state.lidar["color"])

    x, z = state.position
    fx, fz = -math.sin(state.heading), -math.cos(state.heading)
    dx, dz = hazard_pos[0] - x, hazard_pos[2] - z
    norm = math.hypot(dx, dz) or 1.0
    dot = fx * dx / norm + fz * dz / norm

    if dot <= AHEAD_DOT and hazard_clear >= CRITICAL_DIST:
        # peripheral, keep driving
        state.avoidance_trend = 0
        state.target_speed = AI_CRUISE_SPEED * 0.9
        state.lidar["color"] = COLOR_GREEN
        return "AVOIDING (CLEARING)"

    diff = _angle_to(state, hazard_pos) - state.heading
    if hazard_clear < CRITICAL_DIST:
        # stop and pivot, committing to one turn direction until clear
        state.target_speed = -0.01
        if state.avoidance_trend == 0:
            state.avoidance_trend = -1 if math.sin(diff) > 0 else 1
        state.target_rot += 0.02 if state.avoidance_trend > 0 else -0.02
        state.lidar["color"] = COLOR_RED
    else:
        # flow around: slow down but keep moving
        state.target_speed = AI_CRUISE_SPEED * 0.6
        state.target_rot += -0.02 if math.sin(diff) > 0 else 0.02
        state.lidar["color"] = COLOR_AMBER
    return "AVOIDING SLOPE" if slope_detected else "OBSTACLE DETECTED"


def _approach(state, target, dist):
    _show_lidar(state, target.position, COLOR_CYAN)
    if dist < APPROACH_STOP_DIST:
        state.target_speed = 0.0
        state.sim_speed = 0.0
    else:
        diff = _angle_to(state, target.position) - state.heading
        state.target_rot += math.atan2(math.sin(diff), math.cos(diff)) * 0.03
        state.target_speed = AI_CRUISE_SPEED
    return "APPROACHING TARGET"


def _explore(state):
    state.avoidance_trend = 0
    _hide_lidar(state)
    state.slope_line = dict(state.slope_line, visible=False)
    state.target_speed = AI_CRUISE_SPEED
    state.target_rot += math.sin(state.frame_count * 0.005) * 0.002
    return "EXPLORING"


def step_autonomous(state, world, passive, passive_dist):
    if state.scan_timer > 0:
        state.target_speed = 0.0
        return "ANALYZING"

    x, z = state.position
    hazard, hazard_clear = sensors.nearest_hazard(x, z, world.hazards)
    hazard_pos = hazard.position if hazard is not None else None

    probe, slope_detected = sensors.slope_ahead(x, z, state.heading)
    if slope_detected and sensors.LOOK_AHEAD_DIST < hazard_clear:
        hazard_clear = 1.0
        hazard_pos = probe
        state.slope_line = {
            "visible": True,
            "start": (x, terrain.height(x, z) + 1, z),
            "end": probe,
        }
    else:
        state.slope_line = dict(state.slope_line, visible=False)

    if hazard_clear < 0:
        state.sim_speed = -0.02
        state.target_speed = -0.02
        return "COLLISION DETECTED"
    if hazard_clear < AVOID_DIST:
        return _avoid(state, hazard_pos, hazard_clear, slope_detected)
    if passive is not None and passive_dist < APPROACH_DIST:
        return _approach(state, passive, passive_dist)
    return _explore(state)


def execute_scan(state, rng=random):
    if state.scan_timer <= 0 or state.current_target is None:
        return None
    state.scan_timer -= 1
    target = state.current_target
    _show_lidar(state, target.position, COLOR_CYAN, start=_rover_point(state, lift=1.0))

    if state.frame_count % 10 == 0 and state.analysis_data:
        state.analysis_data["confidence"] = min(99, state.analysis_data["confidence"] + 1)
    if state.frame_count % 2 == 0:
        state.scan_progress = min(100.0, state.scan_progress + 0.8)

    if state.scan_timer > 0:
        return None

    target.visible = False
    target.processed = True
    found = science.add_found_target(state, target.type, rng=rng)
    state.current_target = None
    state.scan_progress = 0.0
    state.analysis_data = None
    if state.ai_enabled:
        state.target_speed = -0.05
    return found


def apply_physics(state):
    state.sim_speed += (state.target_speed - state.sim_speed) * 0.05
    state.heading += (state.target_rot - state.heading) * 0.1

    h = state.heading
    state.position[0] -= math.sin(h) * state.sim_speed
    state.position[1] -= math.cos(h) * state.sim_speed
    x, z = state.position

    y_center = terrain.height(x, z)
    y_front = terrain.height(x - math.sin(h) * 0.8, z - math.cos(h) * 0.8)
    y_right = terrain.height(x - math.sin(h - math.pi / 2) * 0.6, z - math.cos(h - math.pi / 2) * 0.6)

    target_pitch = math.atan2(y_center - y_front, 0.8)
    target_roll = math.atan2(y_center - y_right, 0.6)
    state.pitch += (target_pitch - state.pitch) * 0.1
    state.roll += (target_roll - state.roll) * 0.1


def publish_telemetry(state):
    state.telemetry = {
        "speed": abs(state.sim_speed * 100),
        "pitch": int(round(math.degrees(state.pitch))),
        "roll": int(round(math.degrees(state.roll))),
        "ai_state": "STUCK DETECTED" if state.stuck_timer > STUCK_REPORT else state.current_state,
    }


def step_mode(state, world, passive, passive_dist):
    if state.stuck_timer > STUCK_RECOVER:
        return step_recovering(state)
    if state.emergency_stop or (state.link_lost and not state.ai_enabled):
        return step_halted(state)
    if not state.ai_enabled:
        return step_manual(state)
    return step_autonomous(state, world, passive, passive_dist)


def step_frame(state, world, now=None, rng=random):
    """Advance the simulation by one frame. Caller holds ``state.lock``."""
    origin = tuple(state.position)
    world.recycle(origin)

    if state.frame_count % 5 == 0:
        vision.update(state, world, now=now)

    detect_stuck(state)
    passive, passive_dist = world.nearest_unprocessed(*origin)
    update_scan_trigger(state, passive, passive_dist, rng=rng)

    state.current_state = step_mode(state, world, passive, passive_dist)

    execute_scan(state, rng=rng)
    apply_physics(state)
    vision.update_camera(state)

    state.frame_count += 1
    if state.frame_count % 10 == 0:
        publish_telemetry(state)
    return state.current_state
