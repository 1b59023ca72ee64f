from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from jinja2 import TemplateError

from batchconnect.app.repo import AppRepo
from batchconnect.generator import BatchScriptGenerator
from batchconnect.settings import RuntimeDefaults
from batchconnect.slurm.helpers import render_helpers

app = typer.Typer(help="batchconnect CLI: batch-connect apps -> self-contained SLURM scripts")


# -----------------------------
# Argument helpers
# -----------------------------

def _parse_params(params: Optional[List[str]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for kv in params or []:
        if "=" not in kv:
            raise typer.BadParameter(f"expected key=value, got: {kv}")
        k, v = kv.split("=", 1)
        k = k.strip()
        if not k:
            raise typer.BadParameter(f"empty key in: {kv}")
        out[k] = v
    return out


def _defaults(min_port: Optional[int], max_port: Optional[int], password_size: Optional[int]) -> RuntimeDefaults:
    try:
        return RuntimeDefaults.from_env().with_overrides(min_port, max_port, password_size)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _fail(err: Exception) -> None:
    typer.secho(f"error: {err}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _open_repo(repo: str, branch: str) -> AppRepo:
    try:
        return AppRepo.open(repo, branch=branch)
    except (FileNotFoundError, ValueError, RuntimeError, TemplateError) as e:
        _fail(e)


# -----------------------------
# Commands
# -----------------------------

@app.command()
def generate(
    params: Optional[List[str]] = typer.Argument(None, help="Option overrides as key=value"),
    repo: str = typer.Option(..., "--repo", "-r", help="App directory or git URL"),
    branch: str = typer.Option("main", "--branch", "-b", help="Branch to clone"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the script here instead of stdout"),
    min_port: Optional[int] = typer.Option(None, "--min-port", help="find_port lower bound"),
    max_port: Optional[int] = typer.Option(None, "--max-port", help="find_port upper bound"),
    password_size: Optional[int] = typer.Option(None, "--password-size", help="create_passwd default length"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Generate a SLURM batch script for a batch-connect app."""
    overrides = _parse_params(params)
    defaults = _defaults(min_port, max_port, password_size)
    gen = BatchScriptGenerator(_open_repo(repo, branch), defaults=defaults)
    if verbose:
        gen.logger.setLevel(logging.DEBUG)

    try:
        script = gen.generate(overrides)
    except (FileNotFoundError, ValueError, TemplateError) as e:
        _fail(e)

    if out is None:
        typer.echo(script, nl=False)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(script, encoding="utf-8")
    out.chmod(0o755)
    typer.secho(f"Wrote {out}", fg=typer.colors.GREEN, err=True)


@app.command()
def options(
    params: Optional[List[str]] = typer.Argument(None, help="Option overrides as key=value"),
    repo: str = typer.Option(..., "--repo", "-r", help="App directory or git URL"),
    branch: str = typer.Option("main", "--branch", "-b"),
):
    """Print the resolved option set as JSON."""
    overrides = _parse_params(params)
    gen = BatchScriptGenerator(_open_repo(repo, branch))
    typer.echo(json.dumps(gen.resolve(overrides).as_dict(), indent=2, default=str))


@app.command()
def helpers(
    min_port: Optional[int] = typer.Option(None, "--min-port"),
    max_port: Optional[int] = typer.Option(None, "--max-port"),
    password_size: Optional[int] = typer.Option(None, "--password-size"),
):
    """Print the runtime helper library (source it, then call source_helpers)."""
    typer.echo(render_helpers(_defaults(min_port, max_port, password_size)), nl=False)


def main():
    app()


if __name__ == "__main__":
    main()
