"""
GitHub Actions entry: read the triggering event from the runner and dispatch.

The runner provides GITHUB_EVENT_NAME, GITHUB_EVENT_PATH (payload JSON) and
GITHUB_REPOSITORY; they land in config.github via pydantic-settings. Each
failure is also printed as an ``::error::`` workflow command so it shows up
as an annotation on the run.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, TextIO

from autobase.adapters.base import PlatformAdapter
from autobase.adapters.github import GitHubAdapter
from autobase.config import AppConfig
from autobase.dispatcher import handle_github_event
from autobase.report import RunReport


def escape_command_data(message: str) -> str:
    """Escape a workflow command message the way @actions/core does."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def emit_annotations(report: RunReport, out: TextIO | None = None) -> None:
    """Print one ``::error::`` line per recorded failure."""
    stream = out or sys.stdout
    for failure in report.failures:
        stream.write(f"::error::{escape_command_data(failure)}\n")
    stream.flush()


def load_event_payload(path: Path) -> Dict[str, Any]:
    """Read the event payload JSON written by the runner."""
    return json.loads(path.read_text(encoding="utf-8")) or {}


def run_action(
    config: AppConfig,
    event_name: str | None = None,
    payload_path: Path | None = None,
    adapter: PlatformAdapter | None = None,
    out: TextIO | None = None,
    log: logging.Logger | None = None,
) -> int:
    """Process the current Actions event once; return the exit status."""
    logger = log or logging.getLogger("autobase.action")
    report = RunReport()

    name = event_name or config.github.event_name
    path = payload_path or (Path(config.github.event_path) if config.github.event_path else None)

    if adapter is None:
        token = config.github_token_resolved
        if not token:
            report.fail("Input required and not supplied: github-token")
            emit_annotations(report, out)
            return 1
        adapter = GitHubAdapter(token=token, api_url=config.github.api_url)

    payload: Dict[str, Any] = {}
    if path is not None:
        try:
            payload = load_event_payload(path)
        except (OSError, json.JSONDecodeError) as e:
            report.fail(f"Could not read event payload {path}: {e}")
            emit_annotations(report, out)
            return 1

    logger.info("Handling %s event for %s", name or "<none>", config.github.repository or "<unknown repo>")
    try:
        handle_github_event(adapter, name, payload, config, report=report, log=logger)
    finally:
        # failures recorded before an unexpected error still reach the run
        emit_annotations(report, out)
    return 1 if report.failed else 0
