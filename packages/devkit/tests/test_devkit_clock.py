from datetime import datetime, timedelta, timezone

from devkit.clock import now_utc, to_utc


def test_now_utc_is_aware() -> None:
    assert now_utc().utcoffset() == timedelta(0)


def test_to_utc_treats_naive_as_utc() -> None:
    naive = datetime(2024, 5, 1, 12, 0, 0)
    assert to_utc(naive) == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_to_utc_converts_offsets() -> None:
    manila = timezone(timedelta(hours=8))
    value = datetime(2024, 5, 1, 20, 0, 0, tzinfo=manila)
    converted = to_utc(value)
    assert converted.tzinfo == timezone.utc
    assert converted.hour == 12
