"""
Alert Dispatcher

심각한 오류에 대한 알림 채널 선택 및 전송
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from core.logging_config import setup_logger
from errors.exceptions import AlertDeliveryError
from errors.models import (
    ErrorCategory,
    ErrorLogEntry,
    ErrorSeverity,
    generate_id,
    utcnow,
)
from alerts.email import EmailNotifier
from alerts.slack import SlackNotifier
from alerts.webhook import SmsNotifier, WebhookNotifier

logger = setup_logger(__name__)


class AlertType(str, Enum):
    """알림 채널 유형"""
    EMAIL = "email"
    SLACK = "slack"
    WEBHOOK = "webhook"
    SMS = "sms"


@dataclass
class ErrorAlert:
    """전송된 알림 기록 (감사용)"""
    error_id: str
    type: AlertType
    recipient: str
    sent: bool = False
    sent_at: Optional[datetime] = None
    response: Optional[str] = None
    id: str = field(default_factory=lambda: generate_id("alert"))

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "error_id": self.error_id,
            "type": self.type.value,
            "recipient": self.recipient,
            "sent": self.sent,
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
            "response": self.response,
        }


@dataclass(frozen=True)
class AlertTarget:
    type: AlertType
    recipient: str


@dataclass
class AlertRecipients:
    """알림 수신자"""
    admin_email: str = "admin@ads-pro-platform.com"
    dev_team_email: str = "dev-team@ads-pro-platform.com"
    security_email: str = "security@ads-pro-platform.com"
    slack_channel: str = "#alerts"
    webhook_url: str = "https://monitoring.ads-pro-platform.com/webhook"

    @classmethod
    def from_config(cls, config) -> "AlertRecipients":
        return cls(
            admin_email=config.ALERT_ADMIN_EMAIL,
            dev_team_email=config.ALERT_DEV_TEAM_EMAIL,
            security_email=config.ALERT_SECURITY_EMAIL,
            slack_channel=config.ALERT_SLACK_CHANNEL,
            webhook_url=config.ALERT_WEBHOOK_URL,
        )


# ===== 채널 =====

class AlertChannel(ABC):
    """
    알림 채널

    send는 실패 시 예외를 던집니다. 반환값은 감사 기록의 response로 남습니다.
    """

    @abstractmethod
    async def send(self, recipient: str, entry: ErrorLogEntry) -> Optional[str]:
        ...


class EmailChannel(AlertChannel):
    def __init__(self, notifier: EmailNotifier):
        self.notifier = notifier

    async def send(self, recipient: str, entry: ErrorLogEntry) -> Optional[str]:
        ok = await asyncio.to_thread(self.notifier.send_error_report, [recipient], entry)
        if not ok:
            raise AlertDeliveryError(f"Email delivery to {recipient} failed")
        return "email sent"


class SlackChannel(AlertChannel):
    def __init__(self, notifier: SlackNotifier):
        self.notifier = notifier

    async def send(self, recipient: str, entry: ErrorLogEntry) -> Optional[str]:
        ok = await asyncio.to_thread(self.notifier.send_error_alert, entry, recipient)
        if not ok:
            raise AlertDeliveryError(f"Slack delivery to {recipient} failed")
        return "slack message posted"


class WebhookChannel(AlertChannel):
    def __init__(self, notifier: WebhookNotifier):
        self.notifier = notifier

    async def send(self, recipient: str, entry: ErrorLogEntry) -> Optional[str]:
        ok = await asyncio.to_thread(self.notifier.post, recipient, entry)
        if not ok:
            raise AlertDeliveryError(f"Webhook delivery to {recipient} failed")
        return "webhook delivered"


class SmsChannel(AlertChannel):
    def __init__(self, notifier: SmsNotifier):
        self.notifier = notifier

    async def send(self, recipient: str, entry: ErrorLogEntry) -> Optional[str]:
        ok = await asyncio.to_thread(self.notifier.send, recipient, entry)
        if not ok:
            raise AlertDeliveryError(f"SMS delivery to {recipient} failed")
        return "sms sent"


def build_default_channels(config) -> Dict[AlertType, AlertChannel]:
    """설정 기반 기본 채널 구성"""
    return {
        AlertType.EMAIL: EmailChannel(EmailNotifier()),
        AlertType.SLACK: SlackChannel(SlackNotifier(webhook_url=config.SLACK_WEBHOOK_URL)),
        AlertType.WEBHOOK: WebhookChannel(WebhookNotifier()),
        AlertType.SMS: SmsChannel(SmsNotifier(config.SMS_GATEWAY_URL, config.SMS_API_KEY)),
    }


# ===== 디스패처 =====

class AlertDispatcher:
    """
    알림 디스패처

    채널별 전송은 독립적으로 시도되며 한 채널의 실패가
    다른 채널 전송을 막지 않습니다.
    """

    def __init__(
        self,
        channels: Optional[Dict[AlertType, AlertChannel]] = None,
        recipients: Optional[AlertRecipients] = None,
        timeout: Optional[float] = None,
        metrics=None,
    ):
        self.channels = dict(channels or {})
        self.recipients = recipients or AlertRecipients()
        self.timeout = timeout or None
        self.metrics = metrics
        self._alerts: List[ErrorAlert] = []

    def register_channel(self, alert_type: AlertType, channel: AlertChannel):
        self.channels[AlertType(alert_type)] = channel

    def determine_alert_types(self, entry: ErrorLogEntry) -> List[AlertTarget]:
        """채널 선택 규칙 (상호 배타적이지 않음)"""
        targets: List[AlertTarget] = []

        if entry.severity == ErrorSeverity.CRITICAL:
            targets.append(AlertTarget(AlertType.EMAIL, self.recipients.admin_email))
            targets.append(AlertTarget(AlertType.SLACK, self.recipients.slack_channel))
        elif entry.severity == ErrorSeverity.HIGH:
            targets.append(AlertTarget(AlertType.EMAIL, self.recipients.dev_team_email))

        # 카테고리별 추가 알림
        if entry.category == ErrorCategory.SECURITY:
            targets.append(AlertTarget(AlertType.EMAIL, self.recipients.security_email))

        if entry.category == ErrorCategory.API and entry.severity == ErrorSeverity.HIGH:
            targets.append(AlertTarget(AlertType.WEBHOOK, self.recipients.webhook_url))

        return targets

    async def _deliver(self, alert: ErrorAlert, entry: ErrorLogEntry):
        channel = self.channels.get(alert.type)
        if channel is None:
            raise AlertDeliveryError(f"No channel configured for {alert.type.value}")

        call = channel.send(alert.recipient, entry)
        if self.timeout:
            return await asyncio.wait_for(call, timeout=self.timeout)
        return await call

    async def dispatch(self, entry: ErrorLogEntry) -> List[ErrorAlert]:
        """
        알림 전송

        Args:
            entry: 오류 로그 엔트리

        Returns:
            이번 전송에서 생성된 알림 기록
        """
        created: List[ErrorAlert] = []

        for target in self.determine_alert_types(entry):
            alert = ErrorAlert(
                error_id=entry.id,
                type=target.type,
                recipient=target.recipient,
            )
            try:
                response = await self._deliver(alert, entry)
                alert.sent = True
                alert.sent_at = utcnow()
                alert.response = response
                logger.info(f"Alert sent via {target.type.value} to {target.recipient}")
            except asyncio.TimeoutError:
                alert.response = f"timed out after {self.timeout}s"
                logger.error(f"Alert via {target.type.value} to {target.recipient} timed out")
            except Exception as e:
                alert.response = str(e)
                logger.error(f"Failed to send {target.type.value} alert: {e}")

            self._alerts.append(alert)
            created.append(alert)
            if self.metrics is not None:
                self.metrics.inc_alerts(target.type.value, "sent" if alert.sent else "failed")

        return created

    @property
    def alerts(self) -> List[ErrorAlert]:
        return list(self._alerts)

    def get_alerts(self, error_id: Optional[str] = None) -> List[ErrorAlert]:
        """알림 기록 조회"""
        if error_id is None:
            return self.alerts
        return [a for a in self._alerts if a.error_id == error_id]
