from decimal import Decimal

import pytest

from patron_reconciler.normalize import (
    compose_background,
    normalize_currency,
    normalize_date,
    normalize_email,
    parse_amount,
    validate_title,
)


def test_email_is_trimmed_and_lowercased():
    assert normalize_email("  WalkerJeremy@Long.ORG ") == "walkerjeremy@long.org"


@pytest.mark.parametrize("raw", ["invalid-email", "a@", "@long.org", "two@@long.org", "", None, "   "])
def test_invalid_email_is_blank(raw):
    assert normalize_email(raw) == ""


@pytest.mark.parametrize("raw", ["  Alice@Example.com", "invalid-email", "b@x.com"])
def test_email_normalization_is_idempotent(raw):
    once = normalize_email(raw)
    assert normalize_email(once) == once


def test_currency_strips_symbols_and_pads_cents():
    assert normalize_currency("$3,000.00") == "$3000.00"
    assert normalize_currency("$50") == "$50.00"
    assert normalize_currency("1234.5") == "$1234.50"


def test_currency_accepts_computed_totals():
    assert normalize_currency(Decimal("250")) == "$250.00"
    assert normalize_currency(99.999) == "$100.00"


def test_currency_beyond_precision_is_blank():
    assert normalize_currency("$100000000000000000000000000000") == ""
    assert normalize_currency("$1e30") == ""
    assert parse_amount("$1e30") is None
    assert normalize_currency(Decimal("1e30")) == ""
    assert normalize_currency(float("nan")) == ""


def test_currency_empty_and_malformed_are_blank():
    assert normalize_currency("") == ""
    assert normalize_currency(None) == ""
    assert normalize_currency("$abc") == ""
    assert parse_amount("N/A") is None


def test_date_iso_becomes_midnight_utc():
    assert normalize_date("2018-01-25") == "2018-01-25T00:00:00.000Z"


def test_date_iso_with_offset_is_converted_to_utc():
    assert normalize_date("2020-03-01T10:30:00-05:00") == "2020-03-01T15:30:00.000Z"


def test_date_month_name():
    assert normalize_date("Jan 19, 2020") == "2020-01-19T00:00:00.000Z"
    assert normalize_date("September 3, 2021") == "2021-09-03T00:00:00.000Z"


def test_date_month_first_slashes_are_padded():
    assert normalize_date("4/9/2022") == "2022-04-09T00:00:00.000Z"
    assert normalize_date("04/19/2022") == "2022-04-19T00:00:00.000Z"


def test_date_slash_with_time():
    assert normalize_date("12/07/2017 12:34") == "2017-12-07T12:34:00.000Z"


@pytest.mark.parametrize(
    "raw",
    [
        "",
        None,
        "not a date",
        "13/45/2020",
        "2020-02-30",
        "0001-01-01T00:00:00+01:00",
        "9999-12-31T23:00:00-05:00",
    ],
)
def test_unparseable_date_is_blank(raw):
    assert normalize_date(raw) == ""


@pytest.mark.parametrize("title", ["Mr.", "Mrs.", "Ms.", "Dr."])
def test_allowed_titles_pass(title):
    assert validate_title(title) == title


@pytest.mark.parametrize("title", ["Mr", "dr.", "Rev.", "Mr. and Mrs.", ""])
def test_other_titles_are_blank(title):
    assert validate_title(title) == ""


def test_background_combines_present_parts():
    assert compose_background("Engineer", "Married") == "Job Title: Engineer; Marital Status: Married"
    assert compose_background("", "Unknown") == "Marital Status: Unknown"
    assert compose_background("Engineer", None) == "Job Title: Engineer"
    assert compose_background(None, "") == ""
