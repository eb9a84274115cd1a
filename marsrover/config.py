# marsrover/config.py
import os

# Gemini chat backend
GEMINI_API_BASE = os.environ.get(
    "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta/models"
)
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-pro")
GEMINI_TIMEOUT = float(os.environ.get("GEMINI_TIMEOUT", "60"))

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 2048,
}

# Dashboard / stream
DASHBOARD_HOST = os.environ.get("DASHBOARD_HOST", "0.0.0.0")
DASHBOARD_PORT = int(os.environ.get("DASHBOARD_PORT", "8000"))
STREAM_PORT = int(os.environ.get("STREAM_PORT", "5000"))
STREAM_FPS = int(os.environ.get("STREAM_FPS", "15"))

# Simulation
SIM_FPS = int(os.environ.get("SIM_FPS", "60"))

# Alerts
TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN", "")
TELEGRAM_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID", "")


def gemini_api_key():
    # read per call, never cached
    return os.environ.get("GEMINI_API_KEY")
