from __future__ import annotations

import logging

import httpx

from .. import __version__

logger = logging.getLogger(__name__)

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


class PushoverClient:
    """
    Fire-and-forget delivery: failed sends are logged and reported as False,
    never raised.
    """

    def __init__(self, token: str, user: str, url: str = PUSHOVER_URL, timeout: float = 20.0):
        self._token = token
        self._user = user
        self._url = url

        self._client = httpx.Client(
            headers={"User-Agent": f"secret-tx-notifier/{__version__}"},
            timeout=httpx.Timeout(timeout),
        )

    def close(self) -> None:
        self._client.close()

    def send(self, message: str, title: str, priority: int = 0) -> bool:
        payload = {
            "message": message,
            "title": title,
            "priority": priority,
            "token": self._token,
            "user": self._user,
        }

        try:
            resp = self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Failed to send notification: %s", e)
            return False

        if not resp.is_success:
            logger.warning("Notification error: %s %s", resp.status_code, resp.text)
            return False

        logger.info("Notification sent: %s", title)
        return True
