# batchconnect/slurm/body.py

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from batchconnect.app.render import get_package_template_env
from batchconnect.settings import RuntimeDefaults
from batchconnect.slurm.helpers import render_helpers

BODY_TEMPLATE = "body.sh.j2"

DEFAULT_WORK_DIR = "$PWD"
CONN_FILE_NAME = "connection.yml"


@dataclass(frozen=True)
class Fragments:
    """Rendered app fragments, in execution order."""

    before: str = ""
    run: str = ""
    after: str = ""


def parse_conn_params(raw: Any) -> Dict[str, Any]:
    """
    Connection parameters for the descriptor.

    Accepts a JSON object (written as-is) or a JSON list of shell variable
    names (each written as `name: ${name}`, expanded when the script runs).
    Anything else is rejected so no partial descriptor is ever emitted.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"conn_params is not valid JSON: {e}") from e
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, list) and all(isinstance(n, str) for n in raw):
        return {name: "${" + name + "}" for name in raw}
    raise ValueError("conn_params must be a JSON object or a list of variable names")


def heredoc_escape(text: str) -> str:
    # unquoted heredoc: keep $ live for ${name} expansion, neutralize \ and `
    return text.replace("\\", "\\\\").replace("`", "\\`")


def conn_file_path(options: Mapping[str, Any], work_dir: str) -> str:
    conn_file = options.get("conn_file")
    if conn_file:
        return str(conn_file)
    return f"{work_dir.rstrip('/')}/{CONN_FILE_NAME}"


def compose_body(
    options: Mapping[str, Any],
    fragments: Fragments,
    defaults: Optional[RuntimeDefaults] = None,
) -> str:
    """
    Script body: cd, create_yml, clean_up + traps, helper library, host,
    before, background run, descriptor, wait.

    The descriptor is written after the payload starts so values the payload
    picks (a port, a password) are in scope; SCRIPT_PID is captured before
    anything blocks so clean_up can always reach the payload's children.
    """
    work_dir = str(options.get("work_dir") or DEFAULT_WORK_DIR)
    conn_params = parse_conn_params(options.get("conn_params"))
    conn_yaml = yaml.safe_dump(conn_params, default_flow_style=False, sort_keys=False)

    tpl = get_package_template_env().get_template(BODY_TEMPLATE)
    return tpl.render(
        work_dir=work_dir,
        conn_file=conn_file_path(options, work_dir),
        conn_yaml=heredoc_escape(conn_yaml),
        after=fragments.after.rstrip("\n"),
        helpers=render_helpers(defaults).rstrip("\n"),
        before=fragments.before.rstrip("\n"),
        run=fragments.run.rstrip("\n") or ":",
    )
