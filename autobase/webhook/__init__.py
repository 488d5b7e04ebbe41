"""Webhook server for GitHub events."""

from autobase.webhook.server import run_webhook_server, verify_signature

__all__ = ["run_webhook_server", "verify_signature"]
