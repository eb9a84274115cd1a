# marsrover/services/rover_controller.py
import threading
import time

from marsrover import config
from marsrover.core import navigation
from marsrover.core.state_manager import RoverState
from marsrover.core.world import World
from marsrover.web.dashboard_server import run_dashboard
from marsrover.web.stream_server import run_stream


def run_frames(state, world, count, now=None):
    """Step the simulation ``count`` frames back to back, without pacing."""
    result = None
    for _ in range(count):
        with state.lock:
            result = navigation.step_frame(state, world, now=now)
    return result


def tick_link(state, now):
    """Run the failsafe countdown once per whole second since the link dropped."""
    if not state.link_lost:
        return False
    if state.link_lost_at is None:
        state.link_lost_at = now
        return False
    if now - state.link_lost_at < 1.0:
        return False
    state.tick_failsafe()
    if state.link_lost:
        state.link_lost_at += 1.0
    return True


def main():
    state = RoverState()
    world = World()

    # dashboard and map stream in background
    threading.Thread(target=run_dashboard, args=(state,), daemon=True).start()
    threading.Thread(target=run_stream, args=(state, world), daemon=True).start()
    print(f"Mission control on http://{config.DASHBOARD_HOST}:{config.DASHBOARD_PORT}/")

    frame_time = 1.0 / max(1, config.SIM_FPS)
    last_state = None

    try:
        while True:
            started = time.time()
            with state.lock:
                current = navigation.step_frame(state, world, now=started)

                tick_link(state, started)

            if current != last_state:
                print("State:", current)
                last_state = current

            elapsed = time.time() - started
            if elapsed < frame_time:
                time.sleep(frame_time - elapsed)

    except KeyboardInterrupt:
        pass
    finally:
        with state.lock:
            state.release_inputs()
            state.target_speed = 0.0
            state.sim_speed = 0.0
        print("Rover simulation stopped.")


if __name__ == "__main__":
    main()
