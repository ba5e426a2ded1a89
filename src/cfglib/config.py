from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from .decoder import decode
from .errors import ConfigError
from .merge import merge
from .reader import Reader, Value, to_json
from .resolver import Resolver, resolve
from .sources import KeyValue, Source

log = logging.getLogger("cfglib.config")

Decoder = Callable[[KeyValue, Dict[str, Any]], Dict[str, Any]]


def build_tree(
    records: Iterable[KeyValue],
    decoder: Decoder = decode,
    resolver: Resolver = resolve,
) -> Dict[str, Any]:
    """Decode, merge and resolve ``records`` into a fresh tree.

    Each record is decoded into its own fragment and merged in order, so a
    later record wins at any path it shares with an earlier one. The first
    record that fails to decode aborts the build.
    """
    tree: Dict[str, Any] = {}
    count = 0
    for kv in records:
        try:
            fragment = decoder(kv, {})
        except ConfigError:
            log.error("Failed to decode record key=%r format=%r", kv.key, kv.format)
            raise
        merge(tree, fragment)
        count += 1
    log.debug("Merged %d records", count)
    resolver(tree)
    return tree


class Config:
    """Configuration assembled from an ordered list of sources.

    ``load()`` builds and resolves a new tree, then swaps it in with a single
    reference assignment. Readers holding the previous :class:`Reader` keep a
    consistent snapshot; a failed load leaves the current snapshot untouched.
    """

    def __init__(
        self,
        *sources: Source,
        decoder: Decoder = decode,
        resolver: Resolver = resolve,
    ) -> None:
        self.sources: List[Source] = list(sources)
        self._decoder = decoder
        self._resolver = resolver
        self._reader = Reader()
        self._lock = threading.Lock()

    @property
    def reader(self) -> Reader:
        return self._reader

    def load(self) -> "Config":
        with self._lock:
            records: List[KeyValue] = []
            for src in self.sources:
                loaded = src.load()
                log.info("Loaded %d records from %r", len(loaded), src)
                records.extend(loaded)
            tree = build_tree(records, self._decoder, self._resolver)
            self._reader = Reader(tree)
        return self

    def value(self, path: str) -> Optional[Value]:
        return self._reader.value(path)

    def to_json(self) -> str:
        return to_json(self._reader.tree, indent=2, sort_keys=True)


def load_config(*sources: Source, **kwargs: Any) -> Config:
    return Config(*sources, **kwargs).load()
