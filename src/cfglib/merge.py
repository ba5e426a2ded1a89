"""Fold decoded fragments into one configuration tree."""

from __future__ import annotations

from typing import Any, Dict, Iterable


def merge(dst: Dict[str, Any], src: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``src`` into ``dst`` in place and return ``dst``.

    Maps present on both sides merge key by key. Any other collision, including
    a map meeting a scalar, is settled by ``src`` replacing ``dst`` outright.
    """
    for key, value in src.items():
        existing = dst.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            merge(existing, value)
        else:
            dst[key] = _copy(value)
    return dst


def merge_all(fragments: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    tree: Dict[str, Any] = {}
    for fragment in fragments:
        merge(tree, fragment)
    return tree


def _copy(value: Any) -> Any:
    # Containers are copied so the merged tree never aliases a fragment
    if isinstance(value, dict):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value
