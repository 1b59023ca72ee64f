from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from jinja2 import ChainableUndefined, Environment, FileSystemLoader, PackageLoader

TEMPLATE_SUFFIX = ".j2"


def get_app_template_env(repo_root: Path) -> Environment:
    """
    Jinja environment for an app repository.

    Undefined names render empty so a fragment may reference options the
    form does not declare.
    """
    return Environment(
        loader=FileSystemLoader(str(Path(repo_root))),
        undefined=ChainableUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )


def get_package_template_env() -> Environment:
    """Environment for the shell blocks shipped inside batchconnect/templates."""
    return Environment(
        loader=PackageLoader("batchconnect", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def template_context(options: Optional[Mapping[str, Any]] = None) -> dict:
    # options are reachable by name and as `context.<name>`
    ctx = dict(options or {})
    return {**ctx, "context": ctx}


def render_template(
    env: Environment,
    template_path: Path,
    options: Optional[Mapping[str, Any]] = None,
) -> str:
    """Render a template file living under the environment's search path."""
    template_path = Path(template_path)
    root = Path(env.loader.searchpath[0])
    try:
        name = template_path.relative_to(root).as_posix()
    except ValueError:
        name = template_path.name
    tpl = env.get_template(name)
    return tpl.render(**template_context(options))


def render_file(
    env: Environment,
    path: Optional[Path],
    options: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Text of an app file: rendered when it is a .j2 template, verbatim
    otherwise, empty when there is no file.
    """
    if path is None:
        return ""
    path = Path(path)
    if path.suffix == TEMPLATE_SUFFIX:
        return render_template(env, path, options)
    return path.read_text(encoding="utf-8")
