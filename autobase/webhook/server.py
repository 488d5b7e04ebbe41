"""Minimal webhook HTTP server for GitHub events.

Long-running alternative to the Actions entry: each pull_request or
check_suite delivery runs one dispatch with the same rules.
"""

import hashlib
import hmac
import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs

from autobase.adapters.github import GitHubAdapter
from autobase.config import AppConfig
from autobase.dispatcher import handle_github_event

LOG = logging.getLogger("autobase.webhook")


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check X-Hub-Signature-256 (``sha256=<hex hmac>``) against body.

    An empty secret disables verification.
    """
    if not secret:
        return True
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={expected}", signature)


def parse_webhook_body(body: bytes, content_type: str) -> Any:
    """Parse webhook body as JSON.

    Supports raw JSON and application/x-www-form-urlencoded (payload=...).
    """
    if not body:
        return {}
    if "application/x-www-form-urlencoded" in content_type:
        parsed = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
        raw = (parsed.get("payload") or [None])[0]
        if raw is None:
            return {}
        return json.loads(raw)
    return json.loads(body.decode())


class WebhookHandler(BaseHTTPRequestHandler):
    """Handle GET /health and POST on the configured webhook path."""

    config: AppConfig

    def _send_json(self, status: int, data: dict) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def do_GET(self) -> None:
        if self.path == "/health" or self.path == "/":
            self._send_json(200, {"status": "ok", "service": "autobase"})
            return
        self.send_response(404)
        self.end_headers()

    def do_POST(self) -> None:
        if self.path == self.config.webhook.path:
            self._handle_github_webhook()
            return
        self.send_response(404)
        self.end_headers()

    def _handle_github_webhook(self) -> None:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length) if length else b""
        signature = self.headers.get("X-Hub-Signature-256")
        if not verify_signature(self.config.webhook_secret_resolved, body, signature):
            LOG.warning("Rejected webhook with bad or missing signature")
            self._send_json(401, {"error": "invalid signature"})
            return
        try:
            payload = parse_webhook_body(body, self.headers.get("Content-Type", ""))
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError both land here
            LOG.warning("Invalid webhook JSON (%s bytes)", len(body))
            self._send_json(400, {"error": "invalid json"})
            return
        if not isinstance(payload, dict):
            LOG.warning("Webhook payload is a %s, not an object", type(payload).__name__)
            self._send_json(400, {"error": "payload must be a JSON object"})
            return

        event = self.headers.get("X-GitHub-Event", "")
        LOG.info("Webhook event: %s (payload keys: %s)", event, list(payload.keys()))
        if event == "ping":
            self._send_json(200, {"received": True, "failed": False})
            return

        adapter = GitHubAdapter(
            token=self.config.github_token_resolved,
            api_url=self.config.github.api_url,
        )
        report = handle_github_event(adapter, event, payload, self.config, log=LOG)
        self._send_json(200, {"received": True, "failed": report.failed})

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def run_webhook_server(config: AppConfig) -> None:
    """Run HTTP server for webhooks and health check."""
    host = config.webhook.host
    port = config.webhook.port
    WebhookHandler.config = config
    server = HTTPServer((host, port), WebhookHandler)
    LOG.info("Webhook server listening on %s:%s%s", host, port, config.webhook.path)
    server.serve_forever()
