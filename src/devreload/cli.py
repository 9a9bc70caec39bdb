from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from devreload.config import ReloadConfig, ensure_config
from devreload.diagnostics.classifier import classify
from devreload.diagnostics.log_parser import LogGrammar, read_log_lines
from devreload.errors import CompileFailed
from devreload.schemas import BuildFailure, UnexpectedFailure
from devreload.sources.source_map import build_source_map, load_analysis
from devreload.utils import dump_json, write_json

app = typer.Typer(help="devreload: map compiled classes to sources and explain failed reload builds")


def _load_config(path: Path, verbose: bool) -> ReloadConfig:
    config = ReloadConfig.from_path(path) if path.exists() else ReloadConfig.default()
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return config


def _emit(payload: dict, output: Path | None) -> None:
    if output is None:
        typer.echo(dump_json(payload))
        return
    write_json(output, payload)
    typer.echo(f"[devreload] wrote {output}")


@app.command()
def init(
    config: Path = typer.Option(Path(".devreload/config.yaml"), help="Config path"),
    force: bool = typer.Option(False, help="Overwrite existing config"),
) -> None:
    ensure_config(config, force=force)
    typer.echo(f"[devreload] config at {config}")


@app.command("source-map")
def source_map(
    analysis: Path = typer.Argument(..., exists=True, dir_okay=False, help="Compilation analysis JSON"),
    config: Path = typer.Option(Path(".devreload/config.yaml"), help="Config path"),
    output: Optional[Path] = typer.Option(None, help="Write the source map here instead of stdout"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    settings = _load_config(config, verbose)
    sources = build_source_map(
        load_analysis(analysis),
        project_root=settings.project_root,
        marker=settings.generated.marker,
    )
    _emit({name: ref.to_dict() for name, ref in sources.items()}, output)


@app.command()
def diagnose(
    logs: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Build log files"),
    config: Path = typer.Option(Path(".devreload/config.yaml"), help="Config path"),
    output: Optional[Path] = typer.Option(None, help="Write the result here instead of stdout"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    settings = _load_config(config, verbose)
    failure = BuildFailure(
        exceptions=[CompileFailed()],
        logs={path.as_posix(): read_log_lines(path) for path in logs},
    )
    result = classify(failure, LogGrammar.from_config(settings.log_parser))
    _emit(result.to_dict(), output)
    if isinstance(result, UnexpectedFailure):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
