"""
sync_config.py

Run configuration for the Fitbit steps -> Pixela sync.

Resolved once at start-up from the process environment (after loading .env)
and handed to every stage explicitly.

.env expected:
    FITBIT_BASIC_TOKEN=...      # base64(client_id:client_secret)
    FITBIT_REFRESH_TOKEN=...    # rotated on every run
    PIXELA_TOKEN=...
    PIXELA_GRAPH_URL=...        # or PIXELA_USERNAME + PIXELA_GRAPH_ID
    IS_LOCAL=true               # persist the refresh token back into .env
Remote mode (IS_LOCAL unset / not "true"):
    MY_CIRCLE_API_TOKEN=...
    MY_CIRCLE_PROJECT_SLUG=...  # e.g. gh/owner/repo
Optional:
    FITBIT_STEPS_PERIOD=7d
    FITBIT_SYNC_ENV_FILE=...    # .env file rewritten in local mode
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from errors import ConfigurationError


ROOT_DIR = Path(__file__).resolve().parent
ENV_PATH = ROOT_DIR / ".env"

PIXELA_API_BASE = "https://pixe.la/v1"
DEFAULT_STEPS_PERIOD = "7d"
FITBIT_PERIODS = ("1d", "7d", "30d", "1w", "1m", "3m", "6m", "1y")


@dataclass(frozen=True)
class SyncConfig:
    fitbit_basic_token: str
    fitbit_refresh_token: str
    pixela_token: str
    pixela_graph_url: str
    is_local: bool
    env_path: Path = ENV_PATH
    circle_api_token: str | None = None
    circle_project_slug: str | None = None
    steps_period: str = DEFAULT_STEPS_PERIOD


def require_env(env: Mapping[str, str], name: str) -> str:
    v = env.get(name)
    if not v:
        raise ConfigurationError(f"Missing {name} in environment")
    return v


def resolve_graph_url(env: Mapping[str, str]) -> str:
    url = env.get("PIXELA_GRAPH_URL")
    if url:
        return url.rstrip("/")

    username = env.get("PIXELA_USERNAME")
    graph_id = env.get("PIXELA_GRAPH_ID")
    if username and graph_id:
        return f"{PIXELA_API_BASE}/users/{username}/graphs/{graph_id}"

    raise ConfigurationError(
        "Missing PIXELA_GRAPH_URL (or PIXELA_USERNAME and PIXELA_GRAPH_ID) in environment"
    )


def resolve_env_path(env: Mapping[str, str]) -> Path:
    env_file = env.get("FITBIT_SYNC_ENV_FILE")
    return Path(env_file) if env_file else ENV_PATH


def config_from_env(env: Mapping[str, str], env_path: Path | None = None) -> SyncConfig:
    """
    Build a SyncConfig from an environment mapping. Reads nothing else.

    `env_path` is the .env file local mode writes back to; when omitted it is
    FITBIT_SYNC_ENV_FILE, else the repo-root .env.
    """
    is_local = env.get("IS_LOCAL", "").strip().lower() == "true"

    basic_token = require_env(env, "FITBIT_BASIC_TOKEN")
    refresh_token = require_env(env, "FITBIT_REFRESH_TOKEN")

    circle_api_token = None
    circle_project_slug = None
    if not is_local:
        circle_api_token = require_env(env, "MY_CIRCLE_API_TOKEN")
        circle_project_slug = require_env(env, "MY_CIRCLE_PROJECT_SLUG")

    pixela_token = require_env(env, "PIXELA_TOKEN")
    graph_url = resolve_graph_url(env)

    period = env.get("FITBIT_STEPS_PERIOD") or DEFAULT_STEPS_PERIOD
    if period not in FITBIT_PERIODS:
        raise ConfigurationError(
            f"FITBIT_STEPS_PERIOD must be one of {', '.join(FITBIT_PERIODS)}, got: {period}"
        )

    if env_path is None:
        env_path = resolve_env_path(env)

    return SyncConfig(
        fitbit_basic_token=basic_token,
        fitbit_refresh_token=refresh_token,
        pixela_token=pixela_token,
        pixela_graph_url=graph_url,
        is_local=is_local,
        env_path=env_path,
        circle_api_token=circle_api_token,
        circle_project_slug=circle_project_slug,
        steps_period=period,
    )


def load_config(env_path: Path | None = None) -> SyncConfig:
    """
    Load .env into the process environment and resolve the run config.

    The file loaded here is the same file local mode rewrites, so the rotated
    refresh token is what the next run reads.
    """
    if env_path is None:
        env_path = resolve_env_path(os.environ)

    # Always load the same .env path, not whatever cwd happens to be
    load_dotenv(dotenv_path=env_path, override=True)
    return config_from_env(os.environ, env_path=env_path)
