from __future__ import annotations

import pytest

from cfglib.errors import ConfigError
from cfglib.reader import Reader
from cfglib.resolver import make_resolver, resolve


def make_tree():
    return {
        "foo": {
            "bar": {
                "notexist": "${NOTEXIST:100}",
                "port": "${PORT:8081}",
                "count": "${COUNT:0}",
                "enable": "${ENABLE:false}",
                "rate": "${RATE}",
                "empty": "${EMPTY:foobar}",
                "url": "${URL:http://example.com}",
                "decimals": "${DECIMALS}",
                "binary": "${BINARY}",
                "minusBinary": "${MINUSBINARY}",
                "hexadecimal": "${HEXADECIMAL}",
                "minusHexadecimal": "${MINUSHEXADECIMAL}",
                "octal": "${OCTAL}",
                "minusOctal": "${MINUSOCTAL}",
                "array": [
                    "${PORT}",
                    {"foobar": "${NOTEXIST:8081}"},
                ],
                "value1": "${test.value}",
                "value2": "$PORT",
                "value3": "abc${PORT}foo${COUNT}bar",
                "value4": "${foo${bar}}",
                "missing": "${MISSING}",
            },
        },
        "test": {
            "value": "foobar",
        },
        "PORT": "8080",
        "COUNT": "10",
        "ENABLE": "true",
        "RATE": "0.9",
        "EMPTY": "",
        "DECIMALS": ".1314",
        "BINARY": "0b111010",
        "MINUSBINARY": "-0b111010",
        "HEXADECIMAL": "0xF3B",
        "MINUSHEXADECIMAL": "-0xF3B",
        "OCTAL": "0o61",
        "MINUSOCTAL": "-0o61",
    }


@pytest.fixture
def reader():
    tree = make_tree()
    resolve(tree)
    return Reader(tree)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("foo.bar.notexist", 100),
        ("foo.bar.port", 8080),
        ("foo.bar.count", 10),
        ("foo.bar.binary", 0b111010),
        ("foo.bar.minusBinary", -0b111010),
        ("foo.bar.hexadecimal", 0xF3B),
        ("foo.bar.minusHexadecimal", -0xF3B),
        ("foo.bar.octal", 0o61),
        ("foo.bar.minusOctal", -0o61),
    ],
)
def test_whole_leaf_promotes_to_int(reader, path, expected):
    v = reader.value(path)
    assert v is not None
    assert type(v.load()) is int
    assert v.as_int() == expected


def test_whole_leaf_promotes_to_float(reader):
    assert reader.value("foo.bar.rate").load() == 0.9
    assert reader.value("foo.bar.decimals").as_float() == 0.1314


def test_whole_leaf_promotes_to_bool(reader):
    assert reader.value("foo.bar.enable").load() is True


def test_port_still_reads_as_string(reader):
    assert reader.value("foo.bar.port").as_str() == "8080"


def test_found_empty_value_beats_default(reader):
    assert reader.value("foo.bar.empty").load() == ""


def test_missing_without_default_is_empty_string(reader):
    assert reader.value("foo.bar.missing").load() == ""


def test_default_containing_colon(reader):
    assert reader.value("foo.bar.url").as_str() == "http://example.com"


def test_array_elements_resolved_independently(reader):
    assert reader.value("foo.bar.array").load() == [8080, {"foobar": 8081}]


def test_dotted_reference(reader):
    assert reader.value("foo.bar.value1").as_str() == "foobar"


def test_bare_dollar_is_left_alone(reader):
    assert reader.value("foo.bar.value2").as_str() == "$PORT"


def test_concatenation_stays_string(reader):
    assert reader.value("foo.bar.value3").load() == "abc8080foo10bar"


def test_malformed_nested_placeholder_degrades(reader):
    assert reader.value("foo.bar.value4").load() == "}"


def test_unterminated_placeholder_is_verbatim():
    tree = {"a": "${abc", "b": "x${PORT", "PORT": "1"}
    resolve(tree)
    assert tree["a"] == "${abc"
    assert tree["b"] == "x${PORT"


def test_looked_up_value_is_not_re_resolved():
    tree = {"inner": "${X}", "outer": "pre-${inner}"}
    # "inner" is visited first and becomes "" (X is missing)
    resolve(tree)
    assert tree == {"inner": "", "outer": "pre-"}

    tree = {"outer": "pre-${inner}", "inner": "${X:1}"}
    resolve(tree)
    assert tree == {"outer": "pre-${X:1}", "inner": 1}


def test_non_string_leaves_render_into_text():
    tree = {
        "port": 8080,
        "on": True,
        "raw": b"bytes",
        "ratio": 0.5,
        "url": "http://h:${port}/?debug=${on}&r=${ratio}&b=${raw}",
        "copy": "${on}",
    }
    resolve(tree)
    assert tree["url"] == "http://h:8080/?debug=true&r=0.5&b=bytes"
    assert tree["copy"] is True


def test_bytes_leaves_are_not_scanned():
    tree = {"PORT": "1", "raw": b"${PORT}"}
    resolve(tree)
    assert tree["raw"] == b"${PORT}"


def test_whitespace_around_name_is_trimmed():
    tree = {"PORT": "1", "a": "${ PORT }"}
    resolve(tree)
    assert tree["a"] == 1


def test_nested_lists_and_maps():
    tree = {
        "N": "3",
        "items": [["${N}", "x${N}"], {"deep": ["${N:0}", {"k": "${MISSING:0x10}"}]}],
    }
    resolve(tree)
    assert tree["items"] == [[3, "x3"], {"deep": [3, {"k": 16}]}]


def test_without_type_promotion():
    tree = {"PORT": "8080", "port": "${PORT}", "flag": "${F:true}"}
    make_resolver(promote_types=False)(tree)
    assert tree["port"] == "8080"
    assert tree["flag"] == "true"


def test_non_mapping_root_is_an_error():
    with pytest.raises(ConfigError):
        resolve(["${A}"])  # type: ignore[arg-type]


def test_huge_decimal_placeholder_stays_string_and_walk_continues():
    big = "1" * 5000
    tree = {"BIG": big, "x": "${BIG}", "y": "ok${PORT:1}"}
    resolve(tree)
    assert tree["x"] == big
    assert tree["y"] == "ok1"
