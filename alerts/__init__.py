"""
Alerts Module

알림 시스템 (Email, Slack, Webhook, SMS, Dispatcher)
"""

from alerts.slack import (
    SlackAttachment,
    SlackMessage,
    SlackNotifier,
)

from alerts.email import (
    EmailPriority,
    EmailConfig,
    EmailMessage,
    EmailNotifier,
)

from alerts.webhook import (
    SmsNotifier,
    WebhookNotifier,
)

from alerts.dispatcher import (
    AlertChannel,
    AlertDispatcher,
    AlertRecipients,
    AlertTarget,
    AlertType,
    EmailChannel,
    ErrorAlert,
    SlackChannel,
    SmsChannel,
    WebhookChannel,
    build_default_channels,
)

__all__ = [
    # slack
    "SlackAttachment",
    "SlackMessage",
    "SlackNotifier",
    # email
    "EmailPriority",
    "EmailConfig",
    "EmailMessage",
    "EmailNotifier",
    # webhook / sms
    "SmsNotifier",
    "WebhookNotifier",
    # dispatcher
    "AlertChannel",
    "AlertDispatcher",
    "AlertRecipients",
    "AlertTarget",
    "AlertType",
    "EmailChannel",
    "ErrorAlert",
    "SlackChannel",
    "SmsChannel",
    "WebhookChannel",
    "build_default_channels",
]
