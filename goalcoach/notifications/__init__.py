"""Outbound notifications for goal events."""

from __future__ import annotations

from goalcoach.notifications.service import NotificationChannel, NotificationService
from goalcoach.notifications.slack import SlackWebhookChannel
from goalcoach.settings import GoalCoachSettings

__all__ = ["NotificationChannel", "NotificationService", "SlackWebhookChannel", "build_notifier"]


def build_notifier(settings: GoalCoachSettings) -> NotificationService:
    channels: list[NotificationChannel] = []
    if settings.slack_webhook_url:
        channels.append(SlackWebhookChannel(settings.slack_webhook_url))
    return NotificationService(channels)
