"""Webhook command handlers."""

from app.commands.webhooks.meta_webhook_command import MetaWebhookCommand, parse_platform

__all__ = ["MetaWebhookCommand", "parse_platform"]
