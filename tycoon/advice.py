"""Trading advice from a hosted text model (Gemini REST API).

Set GEMINI_API_KEY or advice.api_key in the config file. Without a key,
or on any failure, a canned line is returned instead.
"""

import json
import logging
import os
import ssl
import urllib.error
import urllib.request

import certifi

logger = logging.getLogger(__name__)

_SSL_CTX = ssl.create_default_context(cafile=certifi.where())

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

OFFLINE_FALLBACK = (
    "The AI Advisor is offline. The crystal ball is cloudy because someone "
    "forgot to pay the API bill."
)
ERROR_FALLBACK = (
    "The AI is currently on a coffee break, contemplating the futility of "
    "digital currency. Try again later."
)

PROMPT = """\
You are a cynical, witty, and slightly unhinged financial advisor in a high-stakes financial simulation game.
The player has ${cash:.2f} in cash and a total net worth of ${net_worth:.2f}.
Give them one short, memorable, and darkly humorous piece of trading advice. Be creative and a little dramatic.
Do not give actual financial advice. Keep it under 280 characters.
"""


def build_payload(cash: float, net_worth: float, temperature: float) -> dict:
    return {
        "contents": [{"parts": [{"text": PROMPT.format(cash=cash, net_worth=net_worth)}]}],
        "generationConfig": {"temperature": temperature},
    }


def extract_text(response_json: dict) -> str:
    return response_json["candidates"][0]["content"]["parts"][0]["text"].strip()


class AdviceService:
    def __init__(self, api_key: str | None = None, model: str = "gemini-2.5-flash",
                 temperature: float = 0.9, timeout: float = 15.0):
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        if not self.api_key:
            logger.info("No advice API key configured, advisor disabled")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def get_advice(self, cash: float, net_worth: float) -> str:
        """One line of advice. Never raises."""
        if not self.configured:
            return OFFLINE_FALLBACK
        body = json.dumps(build_payload(cash, net_worth, self.temperature)).encode()
        req = urllib.request.Request(
            API_URL.format(model=self.model),
            data=body,
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self.api_key,
                "User-Agent": "TycoonAurora/1.0",
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=_SSL_CTX) as resp:
                text = extract_text(json.loads(resp.read()))
        except (urllib.error.URLError, TimeoutError, OSError, ValueError,
                KeyError, IndexError, TypeError) as exc:
            logger.warning("Advice request failed: %s", exc)
            return ERROR_FALLBACK
        return text or ERROR_FALLBACK
