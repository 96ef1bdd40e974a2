"""
Webhook / SMS Alert Notifiers

HTTP 웹훅 및 SMS 게이트웨이를 통한 알림 전송
"""

import os
from typing import Any, Dict, Optional

import requests

from core.logging_config import setup_logger
from errors.models import ErrorLogEntry

logger = setup_logger(__name__)


class WebhookNotifier:
    """JSON 웹훅 전송기"""

    def __init__(self, timeout: float = 10, headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", **(headers or {})}

    def build_payload(self, entry: ErrorLogEntry) -> Dict[str, Any]:
        return {
            "event": "error",
            "error": entry.monitoring_payload(),
            "tags": list(entry.tags),
        }

    def post(self, url: str, entry: ErrorLogEntry) -> bool:
        """
        웹훅 전송

        2xx 응답만 성공으로 처리합니다.
        """
        try:
            response = requests.post(
                url,
                json=self.build_payload(entry),
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to post webhook to {url}: {e}")
            return False

        if 200 <= response.status_code < 300:
            logger.debug(f"Webhook delivered: {url}")
            return True

        logger.error(f"Webhook error: {response.status_code} - {response.text}")
        return False


class SmsNotifier:
    """HTTP SMS 게이트웨이 전송기"""

    def __init__(
        self,
        gateway_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 10,
    ):
        self.gateway_url = gateway_url or os.getenv("SMS_GATEWAY_URL")
        self.api_key = api_key or os.getenv("SMS_API_KEY")
        self.timeout = timeout
        self.enabled = self.gateway_url is not None

        if not self.enabled:
            logger.warning("SMS notifications disabled (no gateway URL)")

    def send(self, phone_number: str, entry: ErrorLogEntry) -> bool:
        """SMS 전송 (본문 160자 제한)"""
        if not self.enabled:
            logger.debug(f"SMS disabled, skipping: {entry.id}")
            return False

        text = f"[{entry.severity.value.upper()}] {entry.category.value}: {entry.message}"
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(
                self.gateway_url,
                json={"to": phone_number, "message": text[:160]},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send SMS: {e}")
            return False

        if 200 <= response.status_code < 300:
            return True

        logger.error(f"SMS gateway error: {response.status_code} - {response.text}")
        return False
