# marsrover/core/alerts.py
import random
import string
import threading
import time
from datetime import datetime, timezone

import requests

from marsrover import config

NOMINAL = "nominal"
SUCCESS = "success"
WARNING = "warning"
DANGER = "danger"
LOG_TYPES = (NOMINAL, SUCCESS, WARNING, DANGER)

MAX_ENTRIES = 7


def send_alert(message: str):
    if not config.TELEGRAM_TOKEN or not config.TELEGRAM_CHAT_ID:
        print("[ALERT]", message)
        return
    url = f"https://api.telegram.org/bot{config.TELEGRAM_TOKEN}/sendMessage"
    try:
        requests.post(url, data={"chat_id": config.TELEGRAM_CHAT_ID, "text": message}, timeout=5)
    except requests.RequestException as e:
        print("Alert error:", e)


class MissionLog:
    """Short rolling log shown on the dashboard, newest entry first."""

    def __init__(self, max_entries=MAX_ENTRIES):
        self.max_entries = max_entries
        self.entries = [
            {"id": "init", "time": "14:02:01", "msg": "System Initialized. AEGIS II Online.", "type": NOMINAL}
        ]

    def add(self, msg, type=NOMINAL):
        if type not in LOG_TYPES:
            type = NOMINAL
        stamp = datetime.now(timezone.utc).strftime("%H:%M:%S")
        suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
        entry = {"id": f"{int(time.time() * 1000)}-{suffix}", "time": stamp, "msg": msg, "type": type}
        self.entries = [entry] + self.entries[: self.max_entries - 1]
        if type == DANGER:
            # callers hold RoverState.lock; delivery must not block it
            threading.Thread(target=send_alert, args=(msg,), daemon=True).start()
        return entry

    def latest(self):
        return self.entries[0] if self.entries else None

    def to_list(self):
        return [dict(e) for e in self.entries]
