"""
Tests unitarios para el cliente HTTP del feed de alertas.

Se mockea requests.Session; no hay trafico de red.
"""
from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from alerts_sync.infrastructure.external.alert_feed.feed_client import (
    AlertFeedClient,
    format_feed_time,
)
from alerts_sync.shared.exceptions.sync import FetchFailed


def _response(status_code: int = 200, body="") -> Mock:
    text = body if isinstance(body, str) else json.dumps(body)
    resp = Mock()
    resp.status_code = status_code
    resp.text = text
    resp.json = Mock(side_effect=lambda: json.loads(text))
    return resp


def _client(sync_config, resp=None, **overrides):
    session = Mock(spec=requests.Session)
    session.get.return_value = resp if resp is not None else _response(body=[])
    config = replace(sync_config, **overrides)
    return AlertFeedClient(config, session=session), session


class TestFormatFeedTime:
    def test_none_is_empty_string(self) -> None:
        assert format_feed_time(None) == ""

    def test_truncates_to_seconds_without_zone_suffix(self) -> None:
        instant = datetime(2023, 10, 7, 6, 30, 1, 987654, tzinfo=timezone.utc)

        assert format_feed_time(instant) == "2023-10-07T06:30:01"

    def test_converts_to_feed_zone(self) -> None:
        instant = datetime(2023, 10, 7, 3, 30, 1, tzinfo=timezone.utc)

        assert format_feed_time(instant, "Asia/Jerusalem") == "2023-10-07T06:30:01"

    def test_naive_instant_treated_as_utc(self) -> None:
        assert format_feed_time(datetime(2024, 1, 1, 10, 0, 1)) == "2024-01-01T10:00:01"


class TestAlertFeedClientFetch:
    def test_sends_query_params_proxy_and_timeout(self, sync_config) -> None:
        client, session = _client(
            sync_config, proxy_url="http://proxy.local:3128", feed_timeout_s=12.0
        )

        client.fetch(datetime(2024, 1, 1, 10, 0, 1, tzinfo=timezone.utc))

        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args[0] == sync_config.feed_url
        assert kwargs["params"] == {
            "lang": "he",
            "mode": "0",
            "fromDate": "2024-01-01T10:00:01",
            "toDate": "",
        }
        assert kwargs["proxies"] == {"http": "http://proxy.local:3128", "https": "http://proxy.local:3128"}
        assert kwargs["timeout"] == 12.0

    def test_without_bounds_and_proxy(self, sync_config) -> None:
        client, session = _client(sync_config)

        client.fetch()

        kwargs = session.get.call_args.kwargs
        assert kwargs["params"]["fromDate"] == ""
        assert kwargs["params"]["toDate"] == ""
        assert kwargs["proxies"] is None

    def test_parses_alerts_into_records(self, sync_config) -> None:
        body = [
            {
                "data": "Sderot",
                "date": "07.10.2023",
                "time": "06:30:00",
                "alertDate": "2023-10-07T06:30:00",
                "category": 1,
                "matrix_id": None,
                "rid": 12345,
            }
        ]
        client, _ = _client(sync_config, _response(body=body))

        records = client.fetch()

        assert len(records) == 1
        record = records[0]
        assert record.rid == "12345"
        assert record.date == "07.10.2023"
        assert record.time == "06:30:00"
        assert record.extra == {
            "data": "Sderot",
            "alertDate": "2023-10-07T06:30:00",
            "category": "1",
            "matrix_id": "",
        }
        assert record.field_names == ("data", "date", "time", "alertDate", "category", "matrix_id", "rid")

    @pytest.mark.parametrize("body", ["", "   ", "null", "[]"])
    def test_nothing_new_returns_empty_list(self, sync_config, body: str) -> None:
        client, _ = _client(sync_config, _response(body=body))

        assert client.fetch() == []

    def test_network_error_raises_fetch_failed(self, sync_config) -> None:
        client, session = _client(sync_config)
        session.get.side_effect = requests.ConnectionError("proxy down")

        with pytest.raises(FetchFailed) as exc:
            client.fetch()

        assert "proxy down" in exc.value.message
        assert exc.value.status_code == 502

    def test_http_error_raises_fetch_failed(self, sync_config) -> None:
        client, _ = _client(sync_config, _response(status_code=503, body="busy"))

        with pytest.raises(FetchFailed) as exc:
            client.fetch()

        assert exc.value.details["status"] == 503

    def test_non_json_body_raises_fetch_failed(self, sync_config) -> None:
        client, _ = _client(sync_config, _response(body="<html>blocked</html>"))

        with pytest.raises(FetchFailed):
            client.fetch()

    def test_non_list_payload_raises_fetch_failed(self, sync_config) -> None:
        client, _ = _client(sync_config, _response(body={"error": "x"}))

        with pytest.raises(FetchFailed):
            client.fetch()

    def test_alert_without_rid_raises_fetch_failed(self, sync_config) -> None:
        client, _ = _client(sync_config, _response(body=[{"date": "07.10.2023", "time": "06:30:00"}]))

        with pytest.raises(FetchFailed) as exc:
            client.fetch()

        assert "rid" in exc.value.message
