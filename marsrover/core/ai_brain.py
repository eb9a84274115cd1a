# marsrover/core/ai_brain.py
# Rover AI chat: forwards the conversation to Gemini's generateContent.
import requests

from marsrover import config


class ChatError(Exception):
    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message


def build_contents(message, history):
    contents = []
    for msg in history or []:
        role = "model" if msg.get("role") == "assistant" else "user"
        contents.append({"role": role, "parts": [{"text": msg.get("content", "")}]})
    contents.append({"role": "user", "parts": [{"text": message}]})
    return contents


def generate_url(api_key, model=None):
    return f"{config.GEMINI_API_BASE}/{model or config.GEMINI_MODEL}:generateContent?key={api_key}"


def extract_text(data):
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        print("Gemini API error: unexpected response shape:", e, "raw:", data)
        raise ChatError(502, "API request failed")


def ask_gemini(message, history=None):
    api_key = config.gemini_api_key()
    if not api_key:
        raise ChatError(500, "API key not configured")

    payload = {
        "contents": build_contents(message, history),
        "generationConfig": dict(config.GENERATION_CONFIG),
    }
    r = requests.post(
        generate_url(api_key),
        json=payload,
        headers={"Content-Type": "application/json"},
        timeout=config.GEMINI_TIMEOUT,
    )

    if not r.ok:
        try:
            detail = r.json()
        except ValueError:
            detail = r.text
        print("Gemini API error:", detail)
        raise ChatError(r.status_code, "API request failed")

    return extract_text(r.json())
