"""Dotted-path lookup and typed access over a resolved configuration tree."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from .errors import TypeMismatch
from .literals import parse_number

_BOOL_STRINGS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_DURATION_PART = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def _json_default(o: Any) -> Any:
    if isinstance(o, bytes):
        return o.decode("utf-8", errors="replace")
    return str(o)


def to_json(tree: Any, **kwargs: Any) -> str:
    return json.dumps(tree, default=_json_default, **kwargs)


def render(raw: Any) -> str:
    """Canonical string form of a leaf. Never fails."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float):
        return repr(raw)
    if isinstance(raw, int):
        try:
            return str(raw)
        except ValueError:
            return hex(raw)
    if raw is None:
        return ""
    if isinstance(raw, (dict, list)):
        return to_json(raw, separators=(",", ":"))
    return str(raw)


@dataclass(frozen=True)
class Value:
    """Handle on one node of the tree; conversions happen on access."""

    path: str
    raw: Any

    def load(self) -> Any:
        return self.raw

    def as_str(self) -> str:
        return render(self.raw)

    def as_int(self) -> int:
        raw = self.raw
        if isinstance(raw, bool):
            raise TypeMismatch(self.path, "int", raw)
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if isinstance(raw, (str, bytes)):
            number = parse_number(render(raw))
            if isinstance(number, int):
                return number
        raise TypeMismatch(self.path, "int", raw)

    def as_float(self) -> float:
        raw = self.raw
        if isinstance(raw, bool):
            raise TypeMismatch(self.path, "float", raw)
        try:
            if isinstance(raw, (int, float)):
                return float(raw)
            if isinstance(raw, (str, bytes)):
                number = parse_number(render(raw))
                if number is not None:
                    return float(number)
        except OverflowError:
            pass
        raise TypeMismatch(self.path, "float", raw)

    def as_bool(self) -> bool:
        raw = self.raw
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, (str, bytes)) and render(raw) in _BOOL_STRINGS:
            return _BOOL_STRINGS[render(raw)]
        raise TypeMismatch(self.path, "bool", raw)

    def as_duration(self) -> timedelta:
        """Read the leaf as a duration.

        Numbers (and numeric strings) count seconds. Strings may also use unit
        suffixes and chain them, e.g. ``"1h30m"``, ``"250ms"``, ``"-1.5s"``.
        """
        raw = self.raw
        if isinstance(raw, bool):
            raise TypeMismatch(self.path, "duration", raw)
        try:
            if isinstance(raw, (int, float)):
                return timedelta(seconds=raw)
            if isinstance(raw, (str, bytes)):
                text = render(raw)
                number = parse_number(text)
                if number is not None:
                    return timedelta(seconds=number)
                parsed = _parse_duration(text)
                if parsed is not None:
                    return parsed
        except OverflowError:
            # beyond timedelta.max, or infinite
            pass
        raise TypeMismatch(self.path, "duration", raw)

    def as_list(self) -> List[Any]:
        if isinstance(self.raw, list):
            return self.raw
        raise TypeMismatch(self.path, "list", self.raw)

    def as_dict(self) -> Dict[str, Any]:
        if isinstance(self.raw, dict):
            return self.raw
        raise TypeMismatch(self.path, "dict", self.raw)


def _parse_duration(text: str) -> Optional[timedelta]:
    negative = text.startswith("-")
    body = text[1:] if negative else text
    if not body:
        return None
    seconds = 0.0
    pos = 0
    for m in _DURATION_PART.finditer(body):
        if m.start() != pos:
            return None
        seconds += _DURATION_UNITS[m.group(2)] * float(m.group(1))
        pos = m.end()
    if pos != len(body):
        return None
    return timedelta(seconds=-seconds if negative else seconds)


def lookup(tree: Dict[str, Any], path: str) -> Tuple[Any, bool]:
    """Walk ``tree`` along the dotted ``path``.

    Returns ``(node, True)`` on success and ``(None, False)`` when any segment
    is missing or a segment before the last lands on a non-map leaf.
    """
    if not path:
        return None, False
    node: Any = tree
    for seg in path.split("."):
        if not isinstance(node, dict) or seg not in node:
            return None, False
        node = node[seg]
    return node, True


class Reader:
    """Read-only view over one resolved tree."""

    def __init__(self, tree: Optional[Dict[str, Any]] = None) -> None:
        self.tree: Dict[str, Any] = {} if tree is None else tree

    def value(self, path: str) -> Optional[Value]:
        node, found = lookup(self.tree, path)
        if not found:
            return None
        return Value(path, node)

    def has(self, path: str) -> bool:
        return lookup(self.tree, path)[1]

    def source(self) -> bytes:
        return to_json(self.tree).encode("utf-8")

    def flatten(self) -> List[Tuple[str, Value]]:
        """List every leaf under its dotted key, in tree order."""
        out: List[Tuple[str, Value]] = []

        def _walk(node: Dict[str, Any], prefix: str) -> None:
            for k, v in node.items():
                path = f"{prefix}.{k}" if prefix else k
                if isinstance(v, dict) and v:
                    _walk(v, path)
                else:
                    out.append((path, Value(path, v)))

        _walk(self.tree, "")
        return out
