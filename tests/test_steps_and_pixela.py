from __future__ import annotations

import pytest

from errors import UpstreamDataError
from pixela import date_to_path, publish_steps
from pull_fitbit_steps import StepRecord, fetch_steps

GRAPH_URL = "https://pixe.la/v1/users/me/graphs/steps"


@pytest.mark.parametrize(
    "day, expected",
    [
        ("2023-04-05", "20230405"),
        ("2024-12-31", "20241231"),
        ("2024-02-29", "20240229"),
        ("2000-01-01", "20000101"),
    ],
)
def test_date_to_path(day, expected):
    assert date_to_path(day) == expected


def test_fetch_steps_keeps_upstream_order(http):
    http.queue(200, {"activities-steps": [
        {"dateTime": "2023-04-06", "value": "2000"},
        {"dateTime": "2023-04-05", "value": "1000"},
    ]})

    records = fetch_steps("A", "7d")

    assert records == [StepRecord("2023-04-06", "2000"), StepRecord("2023-04-05", "1000")]
    call = http.calls[0]
    assert call.method == "GET"
    assert call.url == "https://api.fitbit.com/1/user/-/activities/steps/date/today/7d.json"
    assert call.kwargs["headers"]["Authorization"] == "Bearer A"


def test_fetch_steps_failure(http):
    http.queue(429, text="Too Many Requests")

    with pytest.raises(UpstreamDataError) as exc:
        fetch_steps("A")

    assert exc.value.status_code == 429


def test_publish_one_put_per_record(http):
    records = [StepRecord("2023-04-05", "1000"), StepRecord("2023-04-06", "2000")]
    http.queue(200, {"isSuccess": True})
    http.queue(200, {"isSuccess": True})

    assert publish_steps(records, GRAPH_URL, "pix") == 2

    assert [c.url for c in http.calls] == [f"{GRAPH_URL}/20230405", f"{GRAPH_URL}/20230406"]
    assert [c.kwargs["json"] for c in http.calls] == [{"quantity": "1000"}, {"quantity": "2000"}]
    assert all(c.kwargs["headers"]["X-USER-TOKEN"] == "pix" for c in http.calls)


def test_publish_stops_at_first_failure(http):
    records = [StepRecord(f"2023-04-0{d}", "1") for d in (1, 2, 3)]
    http.queue(200, {"isSuccess": True})
    http.queue(503, text="unavailable")

    with pytest.raises(UpstreamDataError, match="2023-04-02"):
        publish_steps(records, GRAPH_URL, "pix")

    assert len(http.calls) == 2


def test_publish_nothing():
    assert publish_steps([], GRAPH_URL, "pix") == 0
