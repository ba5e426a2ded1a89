from __future__ import annotations

import logging
from typing import Any, List, Tuple

import click
from tabulate import tabulate

from cfglib.config import Config
from cfglib.errors import ConfigError, TypeMismatch, format_config_error, suggest_troubleshooting_steps
from cfglib.reader import Value, render, to_json
from cfglib.sources import EnvSource, FileSource, Source, resolve_config_path

_TYPES = ["auto", "int", "float", "bool", "str", "duration"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--json-output",
    "json_output",
    is_flag=True,
    help="Output JSON instead of tables (pretty-printed)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging to stderr (what the CLI is doing)",
)
@click.option(
    "-f",
    "--file",
    "files",
    multiple=True,
    type=click.Path(),
    help="Config file or directory; repeat to layer several (later wins)",
)
@click.option(
    "-e",
    "--env-prefix",
    "env_prefixes",
    multiple=True,
    help="Also read environment variables with this prefix (applied after files)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    files: Tuple[str, ...],
    env_prefixes: Tuple[str, ...],
) -> None:
    """Configuration inspector.

    Layers configuration files and environment variables, expands
    ${PATH:default} placeholders and prints the resolved values. Without
    -f/-e the file comes from CFGCTL_CONFIG or ~/.config/cfgctl/config.yaml.
    """
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    ctx.obj["verbose"] = verbose
    ctx.obj["files"] = files
    ctx.obj["env_prefixes"] = env_prefixes

    # Configure logging once per process
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _sources(ctx: click.Context) -> List[Source]:
    files = ctx.obj.get("files") or ()
    prefixes = ctx.obj.get("env_prefixes") or ()
    sources: List[Source] = [FileSource(f) for f in files]
    if not files and not prefixes:
        sources.append(FileSource(resolve_config_path()))
    if prefixes:
        sources.append(EnvSource(*prefixes))
    return sources


def _load(ctx: click.Context) -> Config:
    log = logging.getLogger("cfgctl.load")
    try:
        log.info("Loading config...")
        cfg = Config(*_sources(ctx)).load()
        log.info("Loaded config from %s", ", ".join(repr(s) for s in cfg.sources))
    except ConfigError as e:
        click.echo(format_config_error(e), err=True)
        if ctx.obj.get("verbose"):
            click.echo("\nTroubleshooting suggestions:", err=True)
            for suggestion in suggest_troubleshooting_steps(e)[:3]:
                click.echo(f"  • {suggestion}", err=True)
        raise SystemExit(2)
    return cfg


def _type_name(raw: Any) -> str:
    if isinstance(raw, dict):
        return "map"
    if isinstance(raw, list):
        return "list"
    if raw is None:
        return "null"
    return type(raw).__name__


def _convert(v: Value, as_type: str) -> Any:
    if as_type == "int":
        return v.as_int()
    if as_type == "float":
        return v.as_float()
    if as_type == "bool":
        return v.as_bool()
    if as_type == "str":
        return v.as_str()
    if as_type == "duration":
        return v.as_duration().total_seconds()
    return v.load()


@cli.command("get")
@click.argument("path")
@click.option(
    "-t",
    "--type",
    "as_type",
    type=click.Choice(_TYPES),
    default="auto",
    show_default=True,
    help="Convert the value before printing (duration prints seconds)",
)
@click.pass_context
def get(ctx: click.Context, path: str, as_type: str) -> None:
    """Print the resolved value at a dotted PATH."""
    log = logging.getLogger("cfgctl.get")
    cfg = _load(ctx)

    v = cfg.value(path)
    if v is None:
        click.echo(f"Key not found: {path}", err=True)
        raise SystemExit(1)

    try:
        out = _convert(v, as_type)
    except TypeMismatch as e:
        click.echo(format_config_error(e), err=True)
        if ctx.obj.get("verbose"):
            click.echo("\nTroubleshooting suggestions:", err=True)
            for suggestion in suggest_troubleshooting_steps(e)[:3]:
                click.echo(f"  • {suggestion}", err=True)
        raise SystemExit(2)

    log.info("Read '%s' as %s", path, as_type)
    if ctx.obj.get("json"):
        doc = {"path": path, "type": _type_name(out), "value": out}
        click.echo(to_json(doc, indent=2, sort_keys=True))
        return
    click.echo(render(out))


@cli.command("dump")
@click.pass_context
def dump(ctx: click.Context) -> None:
    """Show every resolved key with its type and value."""
    log = logging.getLogger("cfgctl.dump")
    cfg = _load(ctx)

    if ctx.obj.get("json"):
        click.echo(cfg.to_json())
        return

    rows = [[key, _type_name(v.load()), v.as_str()] for key, v in cfg.reader.flatten()]
    if not rows:
        click.echo("No keys found")
        return

    log.info("Rendering %d keys", len(rows))
    click.echo(tabulate(rows, headers=["KEY", "TYPE", "VALUE"]))


def main() -> None:  # entry point
    cli(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    main()
