from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"



def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def make_app(tmp_path: Path):
    """
    Write a minimal app repository and return its root.

    `files` maps relative paths to contents and is layered over a
    form.yml/submit.yml.j2 pair unless those are overridden (or set to None
    to leave them out).
    """

    def _make(files: Optional[Dict[str, Optional[str]]] = None, name: str = "app") -> Path:
        root = tmp_path / name
        layout: Dict[str, Optional[str]] = {
            "form.yml": "attributes: {}\n",
            "submit.yml.j2": "batch_connect:\n  native: []\n",
        }
        layout.update(files or {})
        for rel, text in layout.items():
            if text is not None:
                _write(root / rel, text)
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def jupyter_app() -> Path:
    return EXAMPLES_DIR / "jupyter"
