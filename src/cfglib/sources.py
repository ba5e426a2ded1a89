"""Record sources feeding the configuration pipeline.

A source is any object with a ``load()`` method returning a list of
:class:`KeyValue` records. Sources do the I/O; everything downstream of them
works purely in memory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Protocol, Union

from .encoding import get_codec
from .errors import ConfigError

log = logging.getLogger("cfglib.sources")


@dataclass(frozen=True)
class KeyValue:
    key: str
    value: bytes
    format: str = ""


class Source(Protocol):
    def load(self) -> List[KeyValue]: ...


class MemorySource:
    """Serve a fixed list of records."""

    def __init__(self, records: Iterable[KeyValue]) -> None:
        self._records = list(records)

    def load(self) -> List[KeyValue]:
        return list(self._records)

    def __repr__(self) -> str:
        return f"MemorySource({len(self._records)} records)"


class FileSource:
    """Load a configuration file, or every recognized file in a directory.

    Each file becomes one record with an empty key, so its document is merged
    at the root of the tree. The format is taken from the file suffix.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> List[KeyValue]:
        try:
            if self.path.is_dir():
                return self._load_dir()
            return [self._load_file(self.path)]
        except FileNotFoundError as e:
            raise ConfigError(f"config path not found: {self.path}") from e
        except OSError as e:
            raise ConfigError(f"cannot read config path {self.path}: {e.strerror or e}") from e

    def _load_dir(self) -> List[KeyValue]:
        records: List[KeyValue] = []
        for p in sorted(self.path.iterdir()):
            if p.name.startswith(".") or not p.is_file():
                continue
            if get_codec(_suffix(p)) is None:
                log.debug("Skipping %s: no codec for suffix %r", p, _suffix(p))
                continue
            records.append(self._load_file(p))
        log.info("Loaded %d files from %s", len(records), self.path)
        return records

    @staticmethod
    def _load_file(p: Path) -> KeyValue:
        return KeyValue(key="", value=p.read_bytes(), format=_suffix(p))

    def __repr__(self) -> str:
        return f"FileSource({str(self.path)!r})"


class EnvSource:
    """Turn environment variables into raw records.

    With prefixes, only variables starting with one of them are taken and the
    prefix (plus one following underscore) is stripped from the key.
    """

    def __init__(self, *prefixes: str, environ: Optional[Mapping[str, str]] = None) -> None:
        self.prefixes = prefixes
        self._environ = environ

    def load(self) -> List[KeyValue]:
        environ = os.environ if self._environ is None else self._environ
        records: List[KeyValue] = []
        for name, value in environ.items():
            key = self._strip(name)
            if not key:
                continue
            records.append(KeyValue(key=key, value=value.encode("utf-8")))
        log.debug("Collected %d environment records", len(records))
        return records

    def _strip(self, name: str) -> Optional[str]:
        if not self.prefixes:
            return name
        for prefix in self.prefixes:
            if name.startswith(prefix):
                key = name[len(prefix):]
                return key[1:] if key.startswith("_") else key
        return None

    def __repr__(self) -> str:
        return f"EnvSource({', '.join(map(repr, self.prefixes))})"


def _suffix(p: Path) -> str:
    return p.suffix.lstrip(".").lower()


def resolve_config_path() -> Path:
    # Highest priority: explicit override
    override = os.environ.get("CFGCTL_CONFIG")
    if override:
        p = Path(override).expanduser()
        if p.exists():
            return p
        raise ConfigError(f"CFGCTL_CONFIG path not found: {p}")

    # XDG base dirs
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    candidates = [xdg_home / "cfgctl" / "config.yaml"]

    xdg_dirs = os.environ.get("XDG_CONFIG_DIRS", "/etc/xdg")
    for d in xdg_dirs.split(":"):
        if d:
            candidates.append(Path(d) / "cfgctl" / "config.yaml")

    for c in candidates:
        if c.is_file():
            return c

    raise ConfigError(
        "No config file found. Set CFGCTL_CONFIG or create ~/.config/cfgctl/config.yaml"
    )
