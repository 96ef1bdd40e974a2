"""
Slack Alert Notifier

Slack 웹훅을 통한 오류 알림 전송
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from core.logging_config import setup_logger
from errors.models import ErrorLogEntry, ErrorSeverity

logger = setup_logger(__name__)


# 심각도별 색상
SEVERITY_COLORS = {
    ErrorSeverity.LOW: "#36a64f",  # green
    ErrorSeverity.MEDIUM: "#ffcc00",  # yellow
    ErrorSeverity.HIGH: "#ff6600",  # orange
    ErrorSeverity.CRITICAL: "#ff0000",  # red
}

SEVERITY_EMOJIS = {
    ErrorSeverity.LOW: ":information_source:",
    ErrorSeverity.MEDIUM: ":warning:",
    ErrorSeverity.HIGH: ":x:",
    ErrorSeverity.CRITICAL: ":rotating_light:",
}


@dataclass
class SlackAttachment:
    """Slack 메시지 첨부"""
    title: str
    text: str
    color: str = "#36a64f"
    fields: List[Dict[str, Any]] = field(default_factory=list)
    footer: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        attachment = {
            "title": self.title,
            "text": self.text,
            "color": self.color,
            "fields": self.fields,
        }
        if self.footer:
            attachment["footer"] = self.footer
        if self.timestamp:
            attachment["ts"] = int(self.timestamp.timestamp())
        return attachment


@dataclass
class SlackMessage:
    """Slack 메시지"""
    text: str
    channel: Optional[str] = None
    username: str = "Error Handler"
    icon_emoji: str = ":shield:"
    attachments: List[SlackAttachment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        message = {
            "text": self.text,
            "username": self.username,
            "icon_emoji": self.icon_emoji,
        }
        if self.channel:
            message["channel"] = self.channel
        if self.attachments:
            message["attachments"] = [a.to_dict() for a in self.attachments]
        return message


class SlackNotifier:
    """Slack 알림 전송기"""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        default_channel: Optional[str] = None,
        enabled: bool = True,
        timeout: float = 10,
    ):
        self.webhook_url = webhook_url or os.getenv("SLACK_WEBHOOK_URL")
        self.default_channel = default_channel
        self.enabled = enabled and self.webhook_url is not None
        self.timeout = timeout

        if not self.enabled:
            logger.warning("Slack notifications disabled (no webhook URL)")

    def _send_request(self, message: SlackMessage) -> bool:
        """웹훅 요청 전송"""
        if not self.enabled:
            logger.debug(f"Slack disabled, skipping: {message.text}")
            return False

        try:
            response = requests.post(
                self.webhook_url,
                json=message.to_dict(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send Slack message: {e}")
            return False

        if response.status_code == 200:
            logger.debug(f"Slack message sent: {message.text[:50]}...")
            return True

        logger.error(f"Slack API error: {response.status_code} - {response.text}")
        return False

    def send_error_alert(self, entry: ErrorLogEntry, channel: Optional[str] = None) -> bool:
        """
        오류 엔트리 알림 전송

        Args:
            entry: 오류 로그 엔트리
            channel: 채널 (없으면 기본 채널 사용)

        Returns:
            성공 여부
        """
        fields = {
            "Error ID": entry.id,
            "Category": entry.category.value,
            "Severity": entry.severity.value,
        }
        if entry.context.component:
            fields["Component"] = entry.context.component
        if entry.context.action:
            fields["Action"] = entry.context.action

        attachment = SlackAttachment(
            title=f"{entry.category.value.upper()} error",
            text=entry.message[:500],
            color=SEVERITY_COLORS.get(entry.severity, "#36a64f"),
            fields=[
                {"title": k, "value": v, "short": len(str(v)) < 30}
                for k, v in fields.items()
            ],
            footer="Error Handler",
            timestamp=datetime.now(timezone.utc),
        )
        emoji = SEVERITY_EMOJIS.get(entry.severity, ":bell:")

        message = SlackMessage(
            text=f"{emoji} {entry.severity.value.upper()}",
            channel=channel or self.default_channel,
            attachments=[attachment],
        )
        return self._send_request(message)
