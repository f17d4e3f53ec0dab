"""Tests for the normalized event model and its store encoding."""

import dataclasses
from datetime import datetime, timedelta, timezone

import orjson
import pytest

from event_pipeline.data_models.normalized import (
    NormalizedEvent,
    NormalizedMarket,
    NormalizedOption,
    format_rfc3339,
)
from event_pipeline.exceptions import PayloadDecodeError


@pytest.fixture
def event():
    return NormalizedEvent(
        id="1",
        name="Southampton v Bournemouth",
        time=datetime(2017, 8, 20, 15, tzinfo=timezone.utc),
        markets=(
            NormalizedMarket(
                id="101",
                type="win-draw-win",
                options=(
                    NormalizedOption(id="10101", name="Southampton", num=3, den=5),
                    NormalizedOption(id="10102", name="Draw", num=4, den=5),
                ),
            ),
        ),
    )


def test_to_payload_matches_store_schema(event):
    assert event.to_payload() == {
        "id": "1",
        "name": "Southampton v Bournemouth",
        "time": "2017-08-20T15:00:00Z",
        "markets": [
            {
                "id": "101",
                "type": "win-draw-win",
                "options": [
                    {"id": "10101", "name": "Southampton", "num": 3, "den": 5},
                    {"id": "10102", "name": "Draw", "num": 4, "den": 5},
                ],
            }
        ],
    }


def test_to_json_is_decodable_back_to_the_same_event(event):
    body = event.to_json()

    assert orjson.loads(body)["time"] == "2017-08-20T15:00:00Z"
    assert NormalizedEvent.from_payload(body) == event


def test_events_are_immutable(event):
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.name = "changed"
    assert isinstance(event.markets, tuple)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (datetime(2017, 8, 20, 15, tzinfo=timezone.utc), "2017-08-20T15:00:00Z"),
        (datetime(2017, 8, 20, 15), "2017-08-20T15:00:00Z"),
        (datetime(2017, 8, 20, 15, tzinfo=timezone(timedelta(hours=1))), "2017-08-20T15:00:00+01:00"),
    ],
)
def test_format_rfc3339(value, expected):
    assert format_rfc3339(value) == expected


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[]",
        b'{"id": "1", "name": "x"}',
        b'{"id": "1", "name": "x", "time": "2017-08-20T15:00:00"}',
        b'{"id": "1", "name": "x", "time": "2017-08-20T15:00:00Z", "markets": [{"id": "1"}]}',
    ],
)
def test_from_payload_rejects_malformed_bodies(body):
    with pytest.raises(PayloadDecodeError):
        NormalizedEvent.from_payload(body)
