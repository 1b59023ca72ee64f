"""
Batch-connect app repositories.

Layout looked up under the repository root:

    form.yml.j2 | form.yml          parameter schema (required)
    submit.yml.j2                   directive settings (required)
    [template/]before.sh[.j2]       setup fragment
    [template/]script.sh[.j2]       payload fragment
    [template/]after.sh[.j2]        cleanup fragment
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from batchconnect.app.render import TEMPLATE_SUFFIX, get_app_template_env, render_file

Pathish = Union[str, Path]

FORM_CANDIDATES = ("form.yml.j2", "form.yml")
SUBMIT_TEMPLATE = "submit.yml.j2"
FRAGMENT_BASENAMES = ("before.sh", "script.sh", "after.sh")
FRAGMENT_DIR = "template"

log = logging.getLogger(__name__)


def load_yaml_mapping(text: str, source: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"{source}: invalid YAML") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{source} must be a mapping at top level")
    return data


def _find_fragment(root: Path, base: str) -> Optional[Path]:
    tpl = root / FRAGMENT_DIR / f"{base}{TEMPLATE_SUFFIX}"
    if not tpl.is_file():
        tpl = root / f"{base}{TEMPLATE_SUFFIX}"
    plain = root / FRAGMENT_DIR / base
    if not plain.is_file():
        plain = root / base
    if tpl.is_file():
        return tpl
    if plain.is_file():
        return plain
    return None


@dataclass
class AppRepo:
    """
    A checked-out app definition: form attributes, submit template and the
    located shell fragments.
    """

    root: Path
    attributes: Dict[str, Any] = field(default_factory=dict)
    submit_template: Optional[Path] = None
    fragments: Dict[str, Path] = field(default_factory=dict)

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------
    @classmethod
    def from_path(cls, path: Pathish) -> "AppRepo":
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"App directory not found: {root}")

        env = get_app_template_env(root)

        form = next((root / f for f in FORM_CANDIDATES if (root / f).is_file()), None)
        if form is None:
            raise FileNotFoundError(f"form.yml(.j2) not found in {root}")
        form_doc = load_yaml_mapping(render_file(env, form), form.name)
        attributes = form_doc.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise ValueError(f"{form.name}: 'attributes' must be a mapping")

        submit = root / SUBMIT_TEMPLATE
        if not submit.is_file():
            raise FileNotFoundError(f"{SUBMIT_TEMPLATE} missing in {root}")

        fragments = {}
        for base in FRAGMENT_BASENAMES:
            found = _find_fragment(root, base)
            if found is None:
                log.debug("no %s fragment in %s", base, root)
                continue
            fragments[base] = found

        return cls(root=root, attributes=attributes, submit_template=submit, fragments=fragments)

    @classmethod
    def clone(
        cls,
        repo_url: str,
        *,
        branch: str = "main",
        dest: Optional[Pathish] = None,
    ) -> "AppRepo":
        """Shallow-clone `repo_url` at `branch` and load it."""
        target = Path(dest) if dest else Path(tempfile.mkdtemp(prefix="batchconnect_app_"))
        cmd = ["git", "clone", "--depth", "1", "--branch", branch, repo_url, str(target)]
        log.debug("running %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise RuntimeError("git executable not found") from e
        if proc.returncode != 0:
            raise RuntimeError(f"git clone of {repo_url} ({branch}) failed: {proc.stderr.strip()}")
        return cls.from_path(target)

    @classmethod
    def open(cls, location: str, *, branch: str = "main") -> "AppRepo":
        """Local directory if `location` is one, otherwise a git URL to clone."""
        if Path(location).expanduser().is_dir():
            return cls.from_path(location)
        return cls.clone(location, branch=branch)

    # -----------------------------------------------------------------------
    # Rendering
    # -----------------------------------------------------------------------
    def render_submit(self, options: Dict[str, Any]) -> Dict[str, Any]:
        env = get_app_template_env(self.root)
        text = render_file(env, self.submit_template, options)
        return load_yaml_mapping(text, SUBMIT_TEMPLATE)

    def render_fragment(self, base: str, options: Dict[str, Any]) -> str:
        env = get_app_template_env(self.root)
        return render_file(env, self.fragments.get(base), options)
