"""Core library for cfgctl.

Builds a nested configuration tree from flat key/value records, expands
``${PATH:default}`` placeholders against it and serves typed values.
"""

from .config import Config, build_tree, load_config
from .decoder import decode
from .errors import ConfigError, DecodeError, InvalidPath, TypeMismatch, UnsupportedFormat
from .merge import merge, merge_all
from .reader import Reader, Value
from .resolver import make_resolver, resolve
from .sources import EnvSource, FileSource, KeyValue, MemorySource

__all__ = [
    "Config",
    "ConfigError",
    "DecodeError",
    "EnvSource",
    "FileSource",
    "InvalidPath",
    "KeyValue",
    "MemorySource",
    "Reader",
    "TypeMismatch",
    "UnsupportedFormat",
    "Value",
    "build_tree",
    "decode",
    "load_config",
    "make_resolver",
    "merge",
    "merge_all",
    "resolve",
]
