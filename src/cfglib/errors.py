"""Error types and user-facing error formatting for cfglib."""

from __future__ import annotations

from typing import Any


class ConfigError(RuntimeError):
    pass


class UnsupportedFormat(ConfigError):
    """No codec is registered for a record's format hint."""

    def __init__(self, key: str, fmt: str) -> None:
        super().__init__(f"unsupported format {fmt!r} for key {key!r}")
        self.key = key
        self.format = fmt


class DecodeError(ConfigError):
    """A registered codec failed to unmarshal a record's bytes."""

    def __init__(self, key: str, fmt: str, reason: str) -> None:
        super().__init__(f"failed to decode key {key!r} as {fmt}: {reason}")
        self.key = key
        self.format = fmt


class InvalidPath(ConfigError):
    """A dotted key conflicts with the shape of the tree or is malformed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"invalid path {path!r}: {reason}")
        self.path = path


class TypeMismatch(ConfigError):
    """A typed accessor cannot convert the leaf it was called on."""

    def __init__(self, path: str, wanted: str, raw: Any) -> None:
        super().__init__(
            f"value at {path!r} cannot be read as {wanted}: "
            f"{type(raw).__name__} {_short_repr(raw)}"
        )
        self.path = path
        self.wanted = wanted


def _short_repr(raw: Any, limit: int = 80) -> str:
    try:
        text = repr(raw)
    except ValueError:
        # ints past the int/str conversion limit
        text = hex(raw) if isinstance(raw, int) else f"<{type(raw).__name__}>"
    return text if len(text) <= limit else text[: limit - 3] + "..."


def format_config_error(error: Exception) -> str:
    """Format configuration-related error messages."""
    error_str = str(error)

    if "no config file found" in error_str.lower():
        return (
            "No configuration file found. Please either:\n"
            "  • Pass one or more files with -f/--file, or\n"
            "  • Set CFGCTL_CONFIG=/path/to/config.yaml, or\n"
            "  • Create ~/.config/cfgctl/config.yaml"
        )

    if isinstance(error, UnsupportedFormat):
        return (
            f"Configuration error: {error_str}\n"
            "Supported formats are json, yaml and yml."
        )

    if isinstance(error, (DecodeError, InvalidPath)):
        return (
            f"Configuration error: {error_str}\n"
            "Check the source file syntax and that no key is used both as a value and as a section."
        )

    return f"Configuration error: {error_str}"


def suggest_troubleshooting_steps(error: Exception) -> list[str]:
    """Suggest troubleshooting steps based on the error."""
    suggestions: list[str] = []

    if isinstance(error, UnsupportedFormat):
        suggestions.extend([
            "Rename the file to use a .json, .yaml or .yml suffix",
            "Register a codec with cfglib.encoding.register_codec for custom formats",
        ])
    elif isinstance(error, DecodeError):
        suggestions.extend([
            "Validate the file with a JSON/YAML linter",
            "Check indentation and quoting around values containing ':' or '${'",
        ])
    elif isinstance(error, InvalidPath):
        suggestions.extend([
            "Look for a key that is both a scalar and a section (e.g. 'db' and 'db.host')",
            "Check environment variable names for stray dots",
        ])
    elif isinstance(error, TypeMismatch):
        suggestions.extend([
            "Run 'cfgctl dump' to see the resolved type of every key",
            "Use --type str to read the value without conversion",
        ])

    if not suggestions:
        suggestions.extend([
            "Check the logs with -v/--verbose flag for more details",
            "Verify your configuration file is correct",
        ])

    return suggestions
