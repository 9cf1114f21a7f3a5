"""Logging sinks for analysis events"""
from __future__ import annotations

import requests

from config import logger
from src.core import LogEvent, LoggingError

class WebhookLogSink:
    """POSTs analysis events as JSON to a spreadsheet webhook (Google Apps Script web app)"""

    def __init__(self, url: str, *, timeout: float = 15.0) -> None:
        self.url = url
        self.timeout = timeout

    def log(self, event: LogEvent) -> None:
        """
        Deliver one event

        Raises:
            LoggingError: On a network failure or an HTTP error status
        """
        try:
            response = requests.post(
                self.url,
                headers={"Content-Type": "application/json"},
                json=event.model_dump(mode="json"),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LoggingError(
                message=f"Webhook request failed: {e}"
            ) from e

        if response.status_code >= 400:
            raise LoggingError(
                message=f"Webhook returned HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        body = response.text.strip()
        if body and body != "OK":
            logger.debug(f"Webhook response: {body}")

class NullLogSink:
    """Sink used when no webhook is configured"""

    def log(self, event: LogEvent) -> None:
        logger.debug(f"Webhook not configured, dropping event for action {event.action_code.value}")
