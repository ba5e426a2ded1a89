"""Turn one KeyValue record into a nested fragment of the configuration tree."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .encoding import get_codec
from .errors import DecodeError, InvalidPath, UnsupportedFormat
from .merge import merge
from .sources import KeyValue


def split_path(path: str) -> List[str]:
    """Split a dotted key into segments, rejecting empty ones."""
    segments = path.split(".")
    if any(not s for s in segments):
        raise InvalidPath(path, "empty path segment")
    return segments


def decode(kv: KeyValue, target: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Place the record's value at its dotted key inside ``target``.

    Raw records (empty ``format``) keep their bytes untouched. Formatted
    records are unmarshalled by the registered codec first; with an empty key
    the document itself must be a mapping and lands at the root.

    ``target`` is modified in place and returned; a new dict is used when it
    is omitted.
    """
    if target is None:
        target = {}

    leaf = _unwrap(kv)
    if not kv.key:
        if not kv.format:
            raise InvalidPath(kv.key, "raw record needs a key")
        if not isinstance(leaf, dict):
            raise InvalidPath(kv.key, f"root document must be a mapping, got {type(leaf).__name__}")
        return merge(target, leaf)

    segments = split_path(kv.key)
    node = target
    for i, seg in enumerate(segments[:-1]):
        if seg not in node:
            node[seg] = {}
        child = node[seg]
        if not isinstance(child, dict):
            prefix = ".".join(segments[: i + 1])
            raise InvalidPath(kv.key, f"{prefix!r} already holds a value, not a section")
        node = child

    last = segments[-1]
    existing = node.get(last)
    if isinstance(existing, dict) and isinstance(leaf, dict):
        merge(existing, leaf)
    elif isinstance(existing, dict) or (isinstance(leaf, dict) and last in node):
        raise InvalidPath(kv.key, "cannot replace a section with a value or a value with a section")
    else:
        node[last] = leaf
    return target


def _unwrap(kv: KeyValue) -> Any:
    if not kv.format:
        return kv.value
    codec = get_codec(kv.format)
    if codec is None:
        raise UnsupportedFormat(kv.key, kv.format)
    try:
        return _stringify_keys(codec(kv.value))
    except Exception as e:  # codecs raise their own error types; self-referencing aliases recurse
        raise DecodeError(kv.key, kv.format, str(e) or type(e).__name__) from e


def _stringify_keys(value: Any) -> Any:
    # YAML happily produces int or bool mapping keys; lookups are by string
    if isinstance(value, dict):
        return {str(k): _stringify_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_keys(v) for v in value]
    return value
