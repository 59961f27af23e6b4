import json
from datetime import datetime, timedelta, timezone

import pytest

from initledger.core.history.codec import decode_history, encode_history, format_timestamp, parse_timestamp
from initledger.core.history.errors import HistoryDecodeError
from initledger.core.history.types import History, ModuleHistory


@pytest.fixture
def history():
    return History(
        instance_id="i-0abc",
        run_time=datetime(2026, 10, 18, 9, 12, 1, 250000, tzinfo=timezone.utc),
        module_histories=[ModuleHistory("net-v1", True), ModuleHistory("disk-v3", False)],
        version=1,
    )


def test_encode_field_names_and_layout(history):
    data = encode_history(history)

    assert not data.endswith(b"\n")
    assert json.loads(data.decode("utf-8")) == {
        "instanceID": "i-0abc",
        "runTime": "2026-10-18T09:12:01.250000Z",
        "moduleHistories": [
            {"key": "net-v1", "success": True},
            {"key": "disk-v3", "success": False},
        ],
        "version": 1,
    }


def test_decode_inverts_encode(history):
    assert decode_history(encode_history(history)) == history


def test_non_ascii_keys_survive(history):
    history.module_histories = [ModuleHistory("ユーザー設定", True)]
    assert decode_history(encode_history(history)).module_histories[0].key == "ユーザー設定"


def test_decode_legacy_field_name_and_nanoseconds():
    """Files from older writers use 'moduleHistory' and nanosecond timestamps."""
    raw = (
        '{"instanceID":"i-0abc","runTime":"2021-03-04T05:06:07.123456789-08:00",'
        '"moduleHistory":[{"key":"net-v1","success":true}],"version":1}'
    )
    decoded = decode_history(raw)

    assert decoded.module_histories == [ModuleHistory("net-v1", True)]
    assert decoded.run_time == datetime(2021, 3, 4, 5, 6, 7, 123456, tzinfo=timezone(timedelta(hours=-8)))


def test_decode_null_modules_and_missing_fields():
    decoded = decode_history(b'{"instanceID":"i-1","moduleHistories":null}')
    assert decoded.module_histories == []
    assert decoded.run_time is None
    assert decoded.version == 0


def test_decode_accepts_future_version_and_unknown_fields():
    decoded = decode_history(
        b'{"instanceID":"i-1","runTime":"2030-01-01T00:00:00Z","moduleHistories":[],'
        b'"version":7,"checksum":"abc"}'
    )
    assert decoded.version == 7
    assert decoded.run_time == datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", [
    b"",
    b'{"instanceID": "i-1", "moduleHisto',
    b"[]",
    b'{"instanceID": 5}',
    b'{"runTime": "yesterday"}',
    b'{"moduleHistories": {"key": "a"}}',
    b'{"moduleHistories": [{"key": "a", "success": "yes"}]}',
    b'{"version": "1"}',
])
def test_decode_rejects_malformed(raw):
    with pytest.raises(HistoryDecodeError):
        decode_history(raw)


def test_timestamp_helpers():
    assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "2026-01-02T03:04:05Z"
    assert parse_timestamp("2026-01-02T03:04:05.5Z") == datetime(2026, 1, 2, 3, 4, 5, 500000, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        parse_timestamp("2026-01-02")
