"""
token_store.py

Where the rotated Fitbit refresh token goes after each run:

- LocalStore: rewrite the FITBIT_REFRESH_TOKEN line of a local .env file.
- RemoteStore: overwrite the CircleCI project env var of the same name, so
  the next scheduled pipeline starts from the new token.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import requests

from errors import StorageError, UpstreamAuthError
from sync_config import SyncConfig

REFRESH_TOKEN_KEY = "FITBIT_REFRESH_TOKEN"
CIRCLE_API_BASE = "https://circleci.com/api/v2"


def update_env_value(key: str, value: str, env_path: Path) -> bool:
    """
    Replace the value of `key` in a KEY=VALUE file. Keeps other lines intact,
    byte for byte, including line endings. Appends the key if no line has it.

    Returns True if an existing line was replaced.
    """
    try:
        with open(env_path, "r", encoding="utf-8", newline="") as f:
            lines = f.read().splitlines(keepends=True)
    except OSError as e:
        raise StorageError(f"Could not read {env_path}: {e}") from e

    found = False
    out: list[str] = []
    for line in lines:
        content = line.rstrip("\r\n")
        if content.split("=", 1)[0] == key:
            out.append(f"{key}={value}{line[len(content):]}")
            found = True
        else:
            out.append(line)

    if not found:
        if out and not out[-1].endswith("\n"):
            out[-1] += "\n"
        out.append(f"{key}={value}\n")

    tmp = env_path.with_name(env_path.name + ".tmp")
    try:
        mode = stat.S_IMODE(env_path.stat().st_mode)
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            f.write("".join(out))
        # replacement keeps the original mode (0600 stays 0600)
        os.chmod(tmp, mode)
        tmp.replace(env_path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise StorageError(f"Could not write {env_path}: {e}") from e

    return found


@dataclass(frozen=True)
class LocalStore:
    env_path: Path
    key: str = REFRESH_TOKEN_KEY

    def describe(self) -> str:
        return str(self.env_path)

    def save(self, refresh_token: str) -> None:
        update_env_value(self.key, refresh_token, self.env_path)


@dataclass(frozen=True)
class RemoteStore:
    api_token: str
    project_slug: str
    name: str = REFRESH_TOKEN_KEY

    def describe(self) -> str:
        return f"CircleCI project {self.project_slug}"

    def save(self, refresh_token: str) -> None:
        url = f"{CIRCLE_API_BASE}/project/{self.project_slug}/envvar"
        headers = {
            "Circle-Token": self.api_token,
            "Content-Type": "application/json",
        }
        body = {"name": self.name, "value": refresh_token}

        r = requests.post(url, headers=headers, json=body, timeout=30)
        if not 200 <= r.status_code < 300:
            raise UpstreamAuthError(
                f"CircleCI env var update failed ({r.status_code}): {r.text}", r.status_code, r.text
            )


TokenStore = Union[LocalStore, RemoteStore]


def select_store(config: SyncConfig) -> TokenStore:
    if config.is_local:
        return LocalStore(env_path=config.env_path)
    # config_from_env guarantees both are set in remote mode
    return RemoteStore(api_token=config.circle_api_token, project_slug=config.circle_project_slug)
