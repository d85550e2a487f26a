"""
pull_fitbit_steps.py

Fitbit daily steps for a fixed window ending today.
"""

from __future__ import annotations

from dataclasses import dataclass

import requests

from errors import UpstreamDataError

API_BASE = "https://api.fitbit.com"


@dataclass(frozen=True)
class StepRecord:
    date: str   # YYYY-MM-DD
    steps: str  # as Fitbit returns it, e.g. "1000"


def fetch_steps(access_token: str, period: str = "7d") -> list[StepRecord]:
    """
    Returns one StepRecord per day in the window, oldest first, exactly as
    Fitbit orders them.
    """
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/json",
    }
    url = f"{API_BASE}/1/user/-/activities/steps/date/today/{period}.json"

    r = requests.get(url, headers=headers, timeout=30)
    if not 200 <= r.status_code < 300:
        raise UpstreamDataError(
            f"Fitbit steps fetch failed ({r.status_code}): {r.text}", r.status_code, r.text
        )

    payload = r.json()
    series = payload.get("activities-steps", [])

    return [StepRecord(date=item["dateTime"], steps=item["value"]) for item in series]
