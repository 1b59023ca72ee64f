from __future__ import annotations

from typing import Iterable

SHEBANG = "#!/usr/bin/env bash"


def assemble_script(directives: Iterable[str], body: str) -> str:
    header = "\n".join(directives)
    text = f"{SHEBANG}\n{header}\n\n{body}"
    return text if text.endswith("\n") else text + "\n"
