from __future__ import annotations

import asyncio
from typing import Annotated, Optional

import typer
from result import Err
from rich.console import Console

from dirstream.config.loader import load_config, sample_config_json
from dirstream.config.log import configure_logging
from dirstream.config.schema import AppConfig, clamp_field
from dirstream.scan import create_session
from dirstream.services.fs import resolve_dir
from dirstream.ui.picker import PromptPicker
from dirstream.ui.views import ConsoleSink, render_failure, render_summary

app = typer.Typer(help="Incrementally list every regular file below a directory.", no_args_is_help=True)

PathArg = Annotated[Optional[str], typer.Argument(help="Directory to scan. Asks for one when omitted.")]
PacingOpt = Annotated[Optional[int], typer.Option("--pacing-ms", help="Delay between entries in ms (0 disables).")]
NoFallbackOpt = Annotated[bool, typer.Option("--no-fallback", help="Do not scan the fallback directory.")]
ConfigOpt = Annotated[Optional[str], typer.Option("--config", help="Path to a JSON config file.")]


def _load(config_path: str | None, console: Console) -> AppConfig:
    result = load_config(config_path)
    if isinstance(result, Err):
        console.print(f"[red]{result.unwrap_err()}[/red]")
        raise typer.Exit(code=2)
    return result.unwrap()


@app.command()
def scan(
    path: PathArg = None,
    pacing_ms: PacingOpt = None,
    no_fallback: NoFallbackOpt = False,
    config: ConfigOpt = None,
    sizes: Annotated[bool, typer.Option("--sizes", help="Show file sizes.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only print the summary.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug details to stderr.")] = False,
) -> None:
    """Scan PATH and stream the files found."""
    console = Console(highlight=False)
    cfg = _load(config, console)
    configure_logging("DEBUG" if verbose else cfg.log_level)

    root = resolve_dir(path) if path else None
    sink = ConsoleSink(console, root_prefix=root or "", show_sizes=sizes, quiet=quiet)
    session = create_session(
        cfg,
        sink,
        pacing_ms=clamp_field(pacing_ms, "pacing_ms") if pacing_ms is not None else None,
        fallback_enabled=False if no_fallback else None,
    )

    if root is None:
        result = asyncio.run(session.select_directory(PromptPicker(console)))
        if result is None:
            console.print("No directory selected")
            return
    else:
        result = asyncio.run(session.start(root))

    if isinstance(result, Err):
        render_failure(console, result.unwrap_err())
        raise typer.Exit(code=1)
    render_summary(console, result.unwrap())


@app.command()
def tui(
    path: PathArg = None,
    pacing_ms: PacingOpt = None,
    no_fallback: NoFallbackOpt = False,
    config: ConfigOpt = None,
) -> None:
    """Browse a live scan of PATH in the terminal."""
    from dirstream.ui.app import ScanApp

    console = Console(stderr=True)
    cfg = _load(config, console)
    configure_logging(cfg.log_level)
    session = create_session(
        cfg,
        pacing_ms=clamp_field(pacing_ms, "pacing_ms") if pacing_ms is not None else None,
        fallback_enabled=False if no_fallback else None,
    )
    if path:
        initial = resolve_dir(path)
    else:
        initial = asyncio.run(PromptPicker(console).pick())
        if initial is None:
            console.print("No directory selected")
            return
    ScanApp(session, initial_directory=initial).run()


@app.command("sample-config")
def sample_config() -> None:
    """Print the default configuration as JSON."""
    typer.echo(sample_config_json())


def main() -> None:
    app()
