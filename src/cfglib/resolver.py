"""Expand ``${PATH}`` / ``${PATH:default}`` placeholders inside string leaves.

Placeholders are looked up in the very tree being resolved, using the same
dotted paths as :meth:`cfglib.reader.Reader.value`. The walk rewrites the tree
in place: each string leaf is replaced by the value its expansion returns.

Two rules decide the type of the rewritten leaf:

* a placeholder that makes up the *whole* leaf is promoted through
  :func:`cfglib.literals.parse_literal`, so ``"${PORT}"`` can become ``8080``;
* a placeholder embedded in surrounding text is spliced in as text and the
  leaf stays a string.

Lookups that fail fall back to the default, then to the empty string. The
scanner is the non-greedy pattern below, so malformed input degrades instead
of raising: ``"${foo${bar}}"`` matches ``"${foo${bar}"`` and leaves ``"}"``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List

from .errors import ConfigError
from .literals import parse_literal
from .reader import lookup, render

log = logging.getLogger("cfglib.resolver")

PLACEHOLDER = re.compile(r"\$\{(.*?)\}")

Resolver = Callable[[Dict[str, Any]], None]


def make_resolver(promote_types: bool = True) -> Resolver:
    """Build a resolver; with ``promote_types=False`` leaves always stay strings."""

    def resolve(tree: Dict[str, Any]) -> None:
        if not isinstance(tree, dict):
            raise ConfigError(f"cannot resolve placeholders in a {type(tree).__name__}, expected a mapping")

        def mapping(expr: str) -> str:
            name, sep, default = expr.strip().partition(":")
            node, found = lookup(tree, name.strip())
            if found:
                return render(node)
            if sep:
                return default
            log.debug("Placeholder ${%s} has no value and no default", expr)
            return ""

        def expand(s: str) -> Any:
            matches = list(PLACEHOLDER.finditer(s))
            if not matches:
                return s
            if len(matches) == 1 and matches[0].group(0) == s:
                text = mapping(matches[0].group(1))
                return parse_literal(text) if promote_types else text
            return PLACEHOLDER.sub(lambda m: mapping(m.group(1)), s)

        def walk_map(sub: Dict[str, Any]) -> None:
            for k, v in sub.items():
                sub[k] = visit(v)

        def walk_list(seq: List[Any]) -> None:
            for i, v in enumerate(seq):
                seq[i] = visit(v)

        def visit(v: Any) -> Any:
            if isinstance(v, str):
                return expand(v)
            if isinstance(v, dict):
                walk_map(v)
            elif isinstance(v, list):
                walk_list(v)
            return v

        walk_map(tree)

    return resolve


resolve = make_resolver()
