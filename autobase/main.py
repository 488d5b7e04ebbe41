"""Autobase entry point.

Two modes: run (handle the current GitHub Actions event once) and serve
(webhook server, one dispatch per delivery). Usage: autobase run | autobase serve.
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from autobase.action import escape_command_data, run_action
from autobase.config import DEFAULT_CONFIG_PATH, load_config
from autobase.logging import AutobaseLogging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (run | serve)."""
    argv = argv if argv is not None else sys.argv[1:]
    sub = "run"
    rest = list(argv)
    if argv and not argv[0].startswith("-"):
        if argv[0] in ("run", "serve"):
            sub = argv[0]
            rest = argv[1:]

    parser = argparse.ArgumentParser(
        prog="autobase",
        description="Autobase - keep labeled pull requests rebased onto their base branch",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--event",
        default=None,
        help="Event name to handle (run mode; default: GITHUB_EVENT_NAME)",
    )
    parser.add_argument(
        "--payload",
        type=Path,
        default=None,
        help="Event payload JSON file (run mode; default: GITHUB_EVENT_PATH)",
    )
    parsed = parser.parse_args(rest)
    parsed.subcommand = sub
    return parsed


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to run or serve."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("autobase").error("Invalid configuration: %s", e)
        print(f"::error::{escape_command_data(f'Invalid configuration: {e}')}")
        return 1

    AutobaseLogging(config.logging).setup()

    if args.check:
        print("Config OK:", config.github.repository or "<no repository>", f"label={config.rebase.label}")
        return 0

    if args.subcommand == "serve":
        from autobase.webhook import run_webhook_server

        log = logging.getLogger("autobase.webhook")
        if not config.webhook.enabled:
            log.warning("Webhook disabled in config; nothing to serve.")
            return 0
        try:
            run_webhook_server(config)
        except KeyboardInterrupt:
            return 0
        except Exception as e:
            log.exception("Fatal error: %s", e)
            return 1
        return 0

    try:
        return run_action(config, event_name=args.event, payload_path=args.payload)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("autobase.action").exception("Fatal error: %s", e)
        print(f"::error::{escape_command_data(f'Action failed with error: {e}')}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
