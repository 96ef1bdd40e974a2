"""
Email Alert Notifier

이메일을 통한 오류 알림 전송
"""

import html
import os
import smtplib
from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from enum import Enum
from typing import Dict, List, Optional

from core.logging_config import setup_logger
from errors.models import ErrorLogEntry, ErrorSeverity

logger = setup_logger(__name__)


class EmailPriority(str, Enum):
    """이메일 우선순위 (X-Priority)"""
    LOW = "5"
    NORMAL = "3"
    HIGH = "1"


@dataclass
class EmailConfig:
    """이메일 설정"""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    use_tls: bool = True
    use_ssl: bool = False
    from_address: Optional[str] = None
    from_name: str = "Error Handler"

    @classmethod
    def from_env(cls) -> "EmailConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=os.getenv("SMTP_USER"),
            smtp_password=os.getenv("SMTP_PASSWORD"),
            use_tls=os.getenv("SMTP_USE_TLS", "true").lower() == "true",
            use_ssl=os.getenv("SMTP_USE_SSL", "false").lower() == "true",
            from_address=os.getenv("SMTP_FROM_ADDRESS"),
            from_name=os.getenv("SMTP_FROM_NAME", "Error Handler"),
        )


@dataclass
class EmailMessage:
    """이메일 메시지"""
    to: List[str]
    subject: str
    body_text: str
    body_html: Optional[str] = None
    priority: EmailPriority = EmailPriority.NORMAL
    headers: Dict[str, str] = field(default_factory=dict)


class EmailNotifier:
    """이메일 알림 전송기"""

    def __init__(
        self,
        config: Optional[EmailConfig] = None,
        enabled: bool = True,
    ):
        self.config = config or EmailConfig.from_env()
        self.enabled = enabled and self.config.smtp_user is not None

        if not self.enabled:
            logger.warning("Email notifications disabled (no SMTP credentials)")

    def _create_mime_message(self, message: EmailMessage) -> MIMEMultipart:
        """MIME 메시지 생성"""
        msg = MIMEMultipart("alternative")

        from_addr = self.config.from_address or self.config.smtp_user
        msg["From"] = f"{self.config.from_name} <{from_addr}>"
        msg["To"] = ", ".join(message.to)
        msg["Subject"] = message.subject
        msg["X-Priority"] = message.priority.value

        for key, value in message.headers.items():
            msg[key] = value

        msg.attach(MIMEText(message.body_text, "plain", "utf-8"))
        if message.body_html:
            msg.attach(MIMEText(message.body_html, "html", "utf-8"))

        return msg

    def _send_email(self, message: EmailMessage) -> bool:
        """이메일 전송"""
        if not self.enabled:
            logger.debug(f"Email disabled, skipping: {message.subject}")
            return False

        try:
            if self.config.use_ssl:
                server = smtplib.SMTP_SSL(self.config.smtp_host, self.config.smtp_port)
            else:
                server = smtplib.SMTP(self.config.smtp_host, self.config.smtp_port)
                if self.config.use_tls:
                    server.starttls()

            try:
                if self.config.smtp_user and self.config.smtp_password:
                    server.login(self.config.smtp_user, self.config.smtp_password)

                server.sendmail(
                    self.config.from_address or self.config.smtp_user,
                    message.to,
                    self._create_mime_message(message).as_string(),
                )
            finally:
                server.quit()

            logger.info(f"Email sent: {message.subject} to {message.to}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {e}")
            return False

    def send(
        self,
        to: List[str],
        subject: str,
        body: str,
        html_body: Optional[str] = None,
        priority: EmailPriority = EmailPriority.NORMAL,
        headers: Optional[Dict[str, str]] = None,
    ) -> bool:
        """
        이메일 전송

        Args:
            to: 수신자 목록
            subject: 제목
            body: 텍스트 본문
            html_body: HTML 본문 (선택)
            priority: 우선순위
            headers: 추가 헤더 (예: X-Error-Id)

        Returns:
            성공 여부
        """
        return self._send_email(EmailMessage(
            to=to,
            subject=subject,
            body_text=body,
            body_html=html_body,
            priority=priority,
            headers=dict(headers or {}),
        ))

    def send_error_report(self, to: List[str], entry: ErrorLogEntry) -> bool:
        """오류 보고서 이메일 전송"""
        subject = f"[{entry.severity.value.upper()}] {entry.category.value} error: {entry.message[:80]}"

        details = {
            "Error ID": entry.id,
            "Category": entry.category.value,
            "Severity": entry.severity.value,
            "Time": entry.created_at.isoformat(),
        }
        if entry.context.component:
            details["Component"] = entry.context.component
        if entry.context.action:
            details["Action"] = entry.context.action
        if entry.context.url:
            details["URL"] = entry.context.url

        lines = [f"{k}: {v}" for k, v in details.items()]
        lines += ["", "Message:", entry.message]
        if entry.stack:
            lines += ["", "Traceback:", entry.stack]

        rows = "".join(
            f"<tr><td style='padding:5px;font-weight:bold;'>{html.escape(k)}</td>"
            f"<td style='padding:5px;'>{html.escape(str(v))}</td></tr>"
            for k, v in details.items()
        )
        color = "#dc3545" if entry.severity == ErrorSeverity.CRITICAL else "#ffc107"
        html_body = (
            f"<div style='font-family:Arial,sans-serif;'>"
            f"<h2 style='background-color:{color};color:white;padding:15px;'>"
            f"{html.escape(entry.message)}</h2>"
            f"<table style='border-collapse:collapse;'>{rows}</table></div>"
        )

        priority = EmailPriority.HIGH
        if entry.severity not in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            priority = EmailPriority.NORMAL

        return self.send(
            to=to,
            subject=subject,
            body="\n".join(lines),
            html_body=html_body,
            priority=priority,
            headers={"X-Error-Id": entry.id},
        )
