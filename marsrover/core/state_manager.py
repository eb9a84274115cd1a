# marsrover/core/state_manager.py
import threading
import time

from marsrover.core import alerts, science

MODE_AI = "ai"
MODE_MANUAL = "manual"
MODES = (MODE_AI, MODE_MANUAL)

LINK_CONNECTED = "connected"
LINK_LOST = "lost"

VIEW_ORBIT = "ORBIT"
VIEW_DRIVER = "DRIVER"

FAILSAFE_SECONDS = 5


class RoverState:
    """Everything the simulation loop and the dashboard share.

    The loop thread owns the per-frame fields; the dashboard only flips
    the operator switches. Both go through ``lock``.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.log = alerts.MissionLog()

        # operator switches
        self.ai_enabled = True
        self.emergency_stop = False
        self.connection_status = LINK_CONNECTED
        self.failsafe_timer = FAILSAFE_SECONDS
        self.link_lost_at = None
        self.camera_view = VIEW_ORBIT
        self.vision_mode = False
        self.inputs = {"up": False, "down": False, "left": False, "right": False}

        # kinematics
        self.position = [0.0, 0.0]
        self.heading = 0.0
        self.target_rot = 0.0
        self.sim_speed = 0.0
        self.target_speed = 0.0
        self.pitch = 0.0
        self.roll = 0.0

        # autonomy bookkeeping
        self.frame_count = 0
        self.stuck_timer = 0
        self.scan_timer = 0
        self.current_target = None
        self.avoidance_trend = 0
        self.current_state = "IDLE"

        # scan HUD
        self.scan_progress = 0.0
        self.analysis_data = None

        # scene overlays
        self.detected_objects = []
        self.last_vision_log = 0.0
        self.lidar = {"visible": False, "color": 0x10B981, "start": None, "end": None}
        self.slope_line = {"visible": False, "start": None, "end": None}
        self.camera = {"position": (0.0, 4.0, 8.0), "look_at": (0.0, 0.6, 0.0)}

        # published telemetry, refreshed every few frames
        self.telemetry = {"speed": 0.0, "pitch": 0, "roll": 0, "ai_state": "IDLE"}
        self.cpu_load = 45
        self.battery_percent = 78.0
        self.bandwidth_saved = 94.0
        self.data_processed = 14.2

        self.science_targets = science.initial_targets()

    @property
    def mode(self):
        return MODE_AI if self.ai_enabled else MODE_MANUAL

    @property
    def link_lost(self):
        return self.connection_status == LINK_LOST

    def set_mode(self, mode):
        if mode not in MODES:
            raise ValueError(f"unknown mode: {mode}")
        enable = mode == MODE_AI
        if enable == self.ai_enabled:
            return
        self.ai_enabled = enable
        self.log.add("AI Autonomy Engaged." if enable else "Switching to Manual Control.", alerts.WARNING)
        if enable:
            self.release_inputs()

    def release_inputs(self):
        for key in self.inputs:
            self.inputs[key] = False

    def trigger_emergency_stop(self):
        self.emergency_stop = True
        self.log.add("EMERGENCY STOP TRIGGERED BY USER", alerts.DANGER)

    def reset_emergency_stop(self):
        self.emergency_stop = False
        self.log.add("Systems rebooted.", alerts.NOMINAL)

    def lose_link(self, now=None):
        if self.link_lost:
            return
        self.connection_status = LINK_LOST
        self.link_lost_at = time.time() if now is None else now
        self.ai_enabled = False
        self.release_inputs()
        self.log.add("WARNING: UPLINK CARRIER LOST.", alerts.DANGER)

    def restore_link(self):
        if not self.link_lost:
            return
        self.connection_status = LINK_CONNECTED
        self.failsafe_timer = FAILSAFE_SECONDS
        self.link_lost_at = None
        self.log.add("Uplink re-established manually.", alerts.SUCCESS)

    def tick_failsafe(self):
        """One second of link loss. Autonomy takes over when the timer runs out."""
        if not self.link_lost:
            self.failsafe_timer = FAILSAFE_SECONDS
            return
        if self.failsafe_timer <= 1:
            self.connection_status = LINK_CONNECTED
            self.link_lost_at = None
            self.ai_enabled = True
            self.log.add("CRITICAL: SIGNAL LOST. FAILSAFE TRIGGERED.", alerts.DANGER)
            self.log.add("AI AUTONOMY ENGAGED. MISSION CONTINUES.", alerts.SUCCESS)
            self.failsafe_timer = FAILSAFE_SECONDS
        else:
            self.failsafe_timer -= 1

    def toggle_camera(self):
        self.camera_view = VIEW_DRIVER if self.camera_view == VIEW_ORBIT else VIEW_ORBIT
        return self.camera_view

    def toggle_vision(self):
        self.vision_mode = not self.vision_mode
        return self.vision_mode

    @property
    def traction_warning(self):
        return abs(self.telemetry["pitch"]) > 20 or abs(self.telemetry["roll"]) > 20

    def snapshot(self):
        t = self.telemetry
        return {
            "mode": self.mode,
            "ai_enabled": self.ai_enabled,
            "ai_state": t["ai_state"],
            "emergency_stop": self.emergency_stop,
            "connection_status": self.connection_status,
            "failsafe_timer": self.failsafe_timer,
            "camera_view": self.camera_view,
            "vision_mode": self.vision_mode,
            "position": [round(self.position[0], 3), round(self.position[1], 3)],
            "heading": round(self.heading, 4),
            "speed": round(t["speed"], 3),
            "moving": t["speed"] > 0.02,
            "pitch": t["pitch"],
            "roll": t["roll"],
            "traction_warning": self.traction_warning,
            "cpu_load": self.cpu_load,
            "battery": self.battery_percent,
            "bandwidth_saved": self.bandwidth_saved,
            "data_processed": self.data_processed,
            "scan_progress": round(self.scan_progress, 1),
            "analysis": dict(self.analysis_data) if self.analysis_data else None,
            "pending_targets": len(science.pending(self)),
            "frame": self.frame_count,
        }
