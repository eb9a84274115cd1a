# marsrover/core/motor_control.py
# Manual drive: the arrow-key flags read by the control loop in MANUAL mode.

MANUAL_SPEED = 0.03
MANUAL_TURN = 0.01

DIRECTIONS = {
    "forward": "up",
    "backward": "down",
    "left": "left",
    "right": "right",
}


def _accepts_input(state):
    return not state.ai_enabled and not state.link_lost


def _set_input(state, direction, pressed):
    key = DIRECTIONS[direction]
    if pressed and not _accepts_input(state):
        return False
    state.inputs[key] = pressed
    return True


def forward(state):
    return _set_input(state, "forward", True)


def backward(state):
    return _set_input(state, "backward", True)


def turn_left(state):
    return _set_input(state, "left", True)


def turn_right(state):
    return _set_input(state, "right", True)


def release(state, direction):
    return _set_input(state, direction, False)


def stop(state):
    state.release_inputs()


def command(state, direction, action):
    """Dispatch a ``press``/``release`` for one of DIRECTIONS."""
    if direction not in DIRECTIONS:
        raise ValueError(f"unknown direction: {direction}")
    if action == "press":
        return _set_input(state, direction, True)
    if action == "release":
        return release(state, direction)
    raise ValueError(f"unknown drive action: {action}")


def manual_targets(state):
    """Speed and heading increment from the held keys."""
    speed = 0.0
    rot = 0.0
    if state.inputs["up"]:
        speed = MANUAL_SPEED
    if state.inputs["down"]:
        speed = -MANUAL_SPEED
    if state.inputs["left"]:
        rot = MANUAL_TURN
    if state.inputs["right"]:
        rot = -MANUAL_TURN
    return speed, rot
