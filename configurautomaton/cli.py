from __future__ import annotations

"""Command-line interface for configurautomaton.

Examples
--------
$ configurautomaton show conf/app.toml
$ configurautomaton set conf/app.yaml server.port=8080 debug=true
$ configurautomaton convert conf/app.toml conf/app.json
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from tabulate import tabulate

from configurautomaton.automaton import Configurautomaton
from configurautomaton.config import AutomatonCfg, load as load_settings
from configurautomaton.config.overrides import apply_overrides, parse_override
from configurautomaton.errors import ConfigurautomatonError
from configurautomaton.formats import resolve_format, supported_formats
from configurautomaton.handle import FileHandle
from configurautomaton.utils.logging_utils import apply_logging_cfg
from configurautomaton.utils.tabula import tabula

app = typer.Typer(add_completion=False)

logger = logging.getLogger(__name__)

# Path name under which the CLI registers the directory of the target file.
_CLI_PATH = "cli"


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context):  # noqa: D401
    """configurautomaton – bind configuration types to TOML/YAML/JSON files."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _settings(path: Optional[Path]) -> AutomatonCfg:
    cfg = load_settings(path) if path else AutomatonCfg()
    apply_logging_cfg(cfg.logging)
    return cfg


def _automaton_for(file: Path, settings: AutomatonCfg) -> Configurautomaton:
    """Register *file* schemaless (as a plain dict) under the CLI path name."""
    automaton = Configurautomaton.from_settings(settings)
    automaton.register_path(_CLI_PATH, file.parent)
    automaton.register_configuration(file.name, dict)
    return automaton


def _fail(exc: Exception) -> None:
    logger.error("%s", exc)
    raise typer.Exit(1)


_SETTINGS_OPTION = typer.Option(None, "--settings", help="Path to a settings file (TOML/YAML/JSON).")


@app.command()
def formats():
    """List supported formats in resolution order."""
    rows = [[fmt.name, fmt.extension, repr(fmt)] for fmt in supported_formats()]
    typer.echo(tabulate(rows, headers=["Format", "Extension", "Plugin"], tablefmt="grid"))


@app.command()
def show(
    file: Path = typer.Argument(..., help="Configuration file to display."),
    settings: Optional[Path] = _SETTINGS_OPTION,
):
    """Print a configuration file as a flat key/value table."""
    try:
        cfg = _settings(settings)
        loaded = _automaton_for(file, cfg).load_immutable(_CLI_PATH, file.name)
    except ConfigurautomatonError as exc:
        _fail(exc)
    typer.echo(tabula(loaded.configuration))


@app.command("set")
def set_values(
    file: Path = typer.Argument(..., help="Configuration file to edit."),
    overrides: List[str] = typer.Argument(..., help="Values to set: key=value"),
    settings: Optional[Path] = _SETTINGS_OPTION,
):
    """Set dotted keys in a configuration file and save it."""
    try:
        for ov in overrides:
            parse_override(ov)
    except ValueError as exc:
        _fail(exc)
    try:
        cfg = _settings(settings)
        automaton = _automaton_for(file, cfg)
        loaded = automaton.load(_CLI_PATH, file.name)
        apply_overrides(loaded.configuration, overrides)
        automaton.save(loaded)
    except ConfigurautomatonError as exc:
        _fail(exc)
    typer.echo(f"Updated {len(overrides)} key(s) in {file}")


@app.command()
def convert(
    source: Path = typer.Argument(..., help="File to read."),
    target: Path = typer.Argument(..., help="File to write; format picked by extension."),
    settings: Optional[Path] = _SETTINGS_OPTION,
):
    """Rewrite a configuration file in another format."""
    try:
        cfg = _settings(settings)
        loaded = _automaton_for(source, cfg).load_immutable(_CLI_PATH, source.name)
        handle = FileHandle(
            target,
            resolve_format(target, **cfg.formats.model_dump()),
            autosave=False,
            encoding=cfg.encoding,
        )
        handle.merge(loaded.configuration)
        handle.save()
        handle.close()
    except ConfigurautomatonError as exc:
        _fail(exc)
    typer.echo(f"Converted {source} -> {target}")


def main():  # pragma: no cover - console entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
