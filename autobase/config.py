"""Configuration loading from YAML, environment and GitHub Action inputs.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.

When running as a GitHub Action, inputs arrive as INPUT_<NAME> variables
(e.g. INPUT_REQUIRED-APPROVALS). An empty input counts as unset.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LABEL = "autobase"
DEFAULT_CONFIG_PATH = Path("autobase.yaml")


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}


class GitHubConfig(BaseSettings):
    """GitHub API settings and Actions run context."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    repository: str = Field(default="", description="Target repo e.g. owner/repo")
    event_name: str = Field(default="", description="Triggering event (set by GitHub Actions)")
    event_path: str = Field(default="", description="Path to event payload JSON (set by GitHub Actions)")


class RebaseConfig(BaseSettings):
    """Which pull requests are kept rebased and onto what."""

    model_config = SettingsConfigDict(env_prefix="AUTOBASE_", extra="ignore")

    label: str = Field(default=DEFAULT_LABEL, description="Label opting a PR into automatic rebase")
    required_approvals: int = Field(default=0, ge=0, description="Approved reviews needed before rebase")
    # None means the repository's default branch
    base_branch: str | None = Field(default=None, description="Branch PRs are kept up to date with")


class WebhookConfig(BaseSettings):
    """Webhook server settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    path: str = Field(default="/webhook/github", description="Webhook URL path")
    secret: str = Field(default="", description="Secret for X-Hub-Signature-256 verification")
    enabled: bool = Field(default=True, description="Enable webhook server")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env + action inputs."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    rebase: RebaseConfig = Field(default_factory=RebaseConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    @property
    def webhook_secret_resolved(self) -> str:
        """Resolve webhook secret from config, env or Docker secret file."""
        s = self.webhook.secret
        if s and not s.startswith("${"):
            return s
        return _read_secret("WEBHOOK_SECRET", "WEBHOOK_SECRET_FILE") or ""


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _action_input(name: str) -> str | None:
    """Return a GitHub Action input the way @actions/core reads it.

    The runner exposes input ``name`` as ``INPUT_<NAME>`` with spaces
    replaced by underscores. Blank values are treated as not provided.
    """
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = (_current_env.get(key) or "").strip()
    return value or None


def _apply_action_inputs(github_raw: dict[str, Any], rebase_raw: dict[str, Any]) -> None:
    """Overlay Action inputs onto raw config sections (in place)."""
    token = _action_input("github-token")
    if token:
        github_raw["token"] = token
    label = _action_input("label")
    if label:
        rebase_raw["label"] = label
    approvals = _action_input("required-approvals")
    if approvals:
        rebase_raw["required_approvals"] = approvals
    base_branch = _action_input("base-branch")
    if base_branch:
        rebase_raw["base_branch"] = base_branch


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file, environment and Action inputs.

    Precedence (highest first): Action inputs, YAML values, env vars with
    section prefix (GITHUB_, AUTOBASE_, WEBHOOK_, LOGGING_), defaults.
    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE, WEBHOOK_SECRET or WEBHOOK_SECRET_FILE.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or DEFAULT_CONFIG_PATH
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)

    github_raw = dict(raw.get("github") or {})
    rebase_raw = dict(raw.get("rebase") or {})
    _apply_action_inputs(github_raw, rebase_raw)

    return AppConfig(
        github=GitHubConfig(**github_raw),
        rebase=RebaseConfig(**rebase_raw),
        webhook=WebhookConfig(**(raw.get("webhook") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
