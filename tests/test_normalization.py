"""Tests for input normalization helpers."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from app.core.normalization import (
    InvalidDateError,
    is_valid_email,
    normalize_date_only,
    normalize_email,
    only_digits,
    parse_boolean,
    parse_nullable,
)


def test_normalize_email_trims_and_lowercases():
    assert normalize_email("  Ana.Souza@Example.COM ") == "ana.souza@example.com"
    assert normalize_email(None) == ""


@pytest.mark.parametrize(
    "value,expected",
    [
        ("ana@example.com", True),
        ("ana@mail.example.com.br", True),
        ("ana@example", False),
        ("ana example@example.com", False),
        ("@example.com", False),
        ("", False),
    ],
)
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected


def test_parse_nullable():
    assert parse_nullable("") is None
    assert parse_nullable("x") == "x"
    assert parse_nullable(0) == 0


def test_parse_boolean():
    assert parse_boolean(True) is True
    assert parse_boolean("false") is False
    assert parse_boolean(" TRUE ") is True
    assert parse_boolean("yes") is None
    assert parse_boolean(None) is None


def test_only_digits():
    assert only_digits("01001-000") == "01001000"
    assert only_digits(None) == ""


class TestNormalizeDateOnly:
    """Birthdate normalization."""

    def test_blank_means_cleared(self):
        assert normalize_date_only(None) is None
        assert normalize_date_only("") is None
        assert normalize_date_only("   ") is None

    def test_plain_date_is_kept(self):
        assert normalize_date_only("1990-05-17") == date(1990, 5, 17)

    def test_date_prefix_wins_over_timezone(self):
        # 23:30 at UTC-3 is already the next day in UTC; the prefix keeps the written day
        assert normalize_date_only("1990-05-17T23:30:00-03:00") == date(1990, 5, 17)

    def test_invalid_prefix_falls_back_to_full_parse(self):
        with pytest.raises(InvalidDateError):
            normalize_date_only("1990-02-30")

    def test_rfc2822_is_converted_to_utc_day(self):
        assert normalize_date_only("Thu, 17 May 1990 23:30:00 -0300") == date(1990, 5, 18)

    def test_datetime_objects_use_utc_day(self):
        local = datetime(1990, 5, 17, 23, 30, tzinfo=timezone(timedelta(hours=-3)))
        assert normalize_date_only(local) == date(1990, 5, 18)
        assert normalize_date_only(datetime(1990, 5, 17, 12, 0, tzinfo=UTC)) == date(1990, 5, 17)

    def test_date_objects_pass_through(self):
        assert normalize_date_only(date(2000, 1, 1)) == date(2000, 1, 1)

    def test_garbage_raises(self):
        with pytest.raises(InvalidDateError):
            normalize_date_only("not a date")

    def test_invalid_date_error_is_value_error(self):
        assert issubclass(InvalidDateError, ValueError)
