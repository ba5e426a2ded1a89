"""Codec registry mapping a format hint to an unmarshal function.

Sources tag each record with a format name (usually the file suffix). The
decoder asks this registry for the matching codec; an unknown name is an
``UnsupportedFormat`` error at decode time.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import yaml

Unmarshal = Callable[[bytes], Any]

_codecs: Dict[str, Unmarshal] = {}


def register_codec(name: str, unmarshal: Unmarshal) -> None:
    """Register (or replace) the codec for ``name``. Names are case-insensitive."""
    if not name:
        raise ValueError("codec name must not be empty")
    _codecs[name.lower()] = unmarshal


def get_codec(name: str) -> Optional[Unmarshal]:
    return _codecs.get(name.lower())


def codec_names() -> List[str]:
    return sorted(_codecs)


def _json_unmarshal(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))


def _yaml_unmarshal(data: bytes) -> Any:
    # An empty document is an empty section, not a null leaf
    doc = yaml.safe_load(data)
    return {} if doc is None else doc


register_codec("json", _json_unmarshal)
register_codec("yaml", _yaml_unmarshal)
register_codec("yml", _yaml_unmarshal)
