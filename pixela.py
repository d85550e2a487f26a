"""
pixela.py

Push daily step counts to a Pixela graph, one pixel per day.

PUT {graph_url}/{yyyyMMdd} overwrites the pixel, so re-sending a day that was
already published is harmless.
"""

from __future__ import annotations

from typing import Iterable

import requests

from errors import UpstreamDataError
from pull_fitbit_steps import StepRecord


def date_to_path(day: str) -> str:
    # "2023-04-05" -> "20230405"
    return day.replace("-", "")


def put_steps(record: StepRecord, graph_url: str, token: str) -> None:
    url = f"{graph_url}/{date_to_path(record.date)}"
    headers = {
        "X-USER-TOKEN": token,
        "Content-Type": "application/json",
    }

    r = requests.put(url, headers=headers, json={"quantity": record.steps}, timeout=30)
    if not 200 <= r.status_code < 300:
        raise UpstreamDataError(
            f"Pixela put failed for {record.date} ({r.status_code}): {r.text}", r.status_code, r.text
        )


def publish_steps(records: Iterable[StepRecord], graph_url: str, token: str) -> int:
    """
    Publish records in order. The first failure aborts the rest; days already
    sent stay published.
    """
    published = 0
    for record in records:
        put_steps(record, graph_url, token)
        published += 1
    return published
