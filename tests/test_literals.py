from __future__ import annotations

import pytest

from cfglib.literals import parse_literal, parse_number


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", 0),
        ("8080", 8080),
        ("-10", -10),
        ("0b111010", 0b111010),
        ("-0b111010", -0b111010),
        ("0B101", 5),
        ("0o61", 0o61),
        ("-0o61", -0o61),
        ("0O17", 15),
        ("0xF3B", 0xF3B),
        ("-0xF3B", -0xF3B),
        ("0xff", 255),
    ],
)
def test_integers(text, expected):
    value = parse_literal(text)
    assert type(value) is int
    assert value == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0.9", 0.9),
        (".1314", 0.1314),
        ("-.1314", -0.1314),
        ("1.", 1.0),
        ("1e3", 1000.0),
        ("2.5E-2", 0.025),
    ],
)
def test_floats(text, expected):
    value = parse_literal(text)
    assert type(value) is float
    assert value == expected


def test_booleans():
    assert parse_literal("true") is True
    assert parse_literal("false") is False
    assert parse_literal("True") == "True"


@pytest.mark.parametrize(
    "text",
    ["", "abc", "007", "0b102", "0x", "-", "1_000", " 1", "inf", "nan", "1.2.3", "http://example.com"],
)
def test_non_literals_stay_strings(text):
    assert parse_literal(text) == text


def test_parse_number_rejects_bools():
    assert parse_number("true") is None


def test_decimal_past_conversion_limit_stays_string():
    text = "1" * 5000
    assert parse_literal(text) == text
    assert parse_literal("-" + text) == "-" + text


def test_prefixed_literals_have_no_length_limit():
    assert parse_literal("0x" + "F" * 5000) == int("F" * 5000, 16)
