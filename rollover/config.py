"""Configuration utilities."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from rollover.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> "RepoRef":
        """Parse an "owner/name" string.

        Raises:
            ConfigError: If the value is not in "owner/name" form.
        """
        parts = value.strip().split("/")
        if len(parts) != 2 or not all(p.strip() for p in parts):
            raise ConfigError(f"Repository must be in 'owner/name' form, got '{value}'")
        return cls(owner=parts[0].strip(), name=parts[1].strip())


@dataclass(frozen=True)
class RunConfig:
    repo: RepoRef
    milestone: int
    issues_count: int
    token: str
    api_url: str = DEFAULT_API_URL


def _action_input(env: Mapping[str, str], name: str) -> Optional[str]:
    """Read a GitHub Actions input (INPUT_<NAME>, hyphens preserved)."""
    value = env.get(f"INPUT_{name.upper()}")
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_int(value: Optional[str], option: str, minimum: int) -> int:
    """Parse an integer option and enforce a lower bound.

    Args:
        value: Raw option value.
        option: Option name used in error messages.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer.

    Raises:
        ConfigError: If the value is missing, not an integer, or below minimum.
    """
    if value is None or not str(value).strip():
        raise ConfigError(f"Missing required option '{option}'")
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"Option '{option}' must be an integer, got '{value}'") from None
    if parsed < minimum:
        raise ConfigError(f"Option '{option}' must be >= {minimum}, got {parsed}")
    return parsed


def repo_from_event(event_path: str) -> RepoRef:
    """Resolve the repository from a GitHub Actions event payload file.

    Args:
        event_path: Path to the JSON event payload.

    Returns:
        Repository reference.

    Raises:
        ConfigError: If the file cannot be read or lacks repository fields.
    """
    try:
        with open(Path(event_path), "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read event payload {event_path}: {e}") from e

    repository = payload.get("repository") if isinstance(payload, dict) else None
    if not isinstance(repository, dict):
        raise ConfigError(f"Event payload {event_path} has no repository")
    owner = (repository.get("owner") or {}).get("login")
    name = repository.get("name")
    if not isinstance(owner, str) or not isinstance(name, str) or not owner or not name:
        raise ConfigError(f"Event payload {event_path} has no repository owner/name")
    return RepoRef(owner=owner, name=name)


def resolve_repo(explicit: Optional[str], env: Mapping[str, str]) -> RepoRef:
    if explicit:
        return RepoRef.parse(explicit)
    if env.get("GITHUB_REPOSITORY"):
        return RepoRef.parse(env["GITHUB_REPOSITORY"])
    if env.get("GITHUB_EVENT_PATH"):
        return repo_from_event(env["GITHUB_EVENT_PATH"])
    raise ConfigError("Cannot resolve repository: pass --repo or set GITHUB_REPOSITORY")


def resolve_config(
    repo: Optional[str] = None,
    milestone: Optional[str] = None,
    issues_count: Optional[str] = None,
    token: Optional[str] = None,
    api_url: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Build a run configuration from explicit values with environment fallback.

    Explicit values win. Otherwise GitHub Actions inputs (INPUT_MILESTONE,
    INPUT_ISSUES-COUNT, INPUT_GITHUB-TOKEN) are used, then GITHUB_TOKEN for the
    credential. The repository comes from GITHUB_REPOSITORY or the event payload.

    Raises:
        ConfigError: If any option is missing or malformed.
    """
    if env is None:
        env = os.environ

    milestone_number = parse_int(
        milestone if milestone is not None else _action_input(env, "milestone"), "milestone", 0
    )
    count = parse_int(
        issues_count if issues_count is not None else _action_input(env, "issues-count"),
        "issues-count",
        1,
    )
    credential = token or _action_input(env, "github-token") or env.get("GITHUB_TOKEN")
    if not credential:
        raise ConfigError("Missing access token: pass --token or set GITHUB_TOKEN")

    repo_ref = resolve_repo(repo, env)
    base_url = (api_url or env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")

    logger.debug(
        "Resolved config repo=%s milestone=%d issues_count=%d api_url=%s",
        repo_ref.full_name,
        milestone_number,
        count,
        base_url,
    )
    return RunConfig(
        repo=repo_ref,
        milestone=milestone_number,
        issues_count=count,
        token=credential,
        api_url=base_url,
    )
