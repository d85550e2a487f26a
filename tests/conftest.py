"""Shared fixtures: a recording stand-in for the requests verbs the sync uses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload if payload is not None else {})

    def json(self) -> Any:
        return self._payload


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict[str, Any]


@dataclass
class FakeHttp:
    responses: list[FakeResponse] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)

    def queue(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.responses.append(FakeResponse(status_code, payload, text))

    def _handle(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(Call(method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        return self.responses.pop(0)

    def methods(self) -> list[str]:
        return [c.method for c in self.calls]


@pytest.fixture
def http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(requests, "post", lambda url, **kw: fake._handle("POST", url, **kw))
    monkeypatch.setattr(requests, "get", lambda url, **kw: fake._handle("GET", url, **kw))
    monkeypatch.setattr(requests, "put", lambda url, **kw: fake._handle("PUT", url, **kw))
    return fake


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text(
        "FITBIT_BASIC_TOKEN=basic\n"
        "# comment line\n"
        "FITBIT_REFRESH_TOKEN=R1\n"
        "PIXELA_TOKEN=pix\n"
        "IS_LOCAL=true\n",
        encoding="utf-8",
    )
    return path
