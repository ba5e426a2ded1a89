"""Recognize numeric and boolean literals in resolved placeholder text.

``parse_literal`` is deliberately narrow: it never relies on ``int()`` or
``float()`` accepting a string on their own terms (those allow whitespace,
underscores, ``inf`` and friends). A string only becomes a number when it
matches one of the grammars below in full.
"""

from __future__ import annotations

import re
from typing import Union

Literal = Union[str, int, float, bool]

_PREFIXED = {
    "0b": (2, re.compile(r"[01]+")),
    "0o": (8, re.compile(r"[0-7]+")),
    "0x": (16, re.compile(r"[0-9a-fA-F]+")),
}
_DECIMAL = re.compile(r"0|[1-9][0-9]*")
_FLOAT = re.compile(r"(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+")

_BOOLS = {"true": True, "false": False}


def parse_number(text: str) -> Union[int, float, None]:
    """Return the int or float spelled by ``text``, or None if it is not numeric."""
    negative = text.startswith("-")
    body = text[1:] if negative else text
    if not body:
        return None

    prefix = body[:2].lower()
    if prefix in _PREFIXED:
        base, digits = _PREFIXED[prefix]
        if not digits.fullmatch(body[2:]):
            return None
        value: Union[int, float] = int(body[2:], base)
    elif _DECIMAL.fullmatch(body):
        try:
            value = int(body)
        except ValueError:
            # longer than the interpreter's int/str conversion limit
            return None
    elif _FLOAT.fullmatch(body):
        value = float(body)
    else:
        return None
    return -value if negative else value


def parse_literal(text: str) -> Literal:
    """Promote ``text`` to bool, int or float when it is exactly such a literal.

    Anything else, the empty string included, is returned unchanged.
    """
    if text in _BOOLS:
        return _BOOLS[text]
    number = parse_number(text)
    return text if number is None else number
