# batchconnect/slurm/directives.py

from __future__ import annotations

import re
from typing import Any, List, Mapping

from batchconnect.schemas.models import SubmitSpec

DIRECTIVE_PREFIX = "#SBATCH"

# option key -> directive body, appended in this order
KEYED_DIRECTIVES = (
    ("bc_queue", "-p {}"),
    ("bc_account", "-A {}"),
    ("custom_reservation", '--job-name="{}"'),
    ("custom_email_address", "--mail-user={}"),
    ("custom_num_cores", "--cpus-per-task={}"),
    ("custom_time", "--time={}"),
)

MEMORY_KEY = "custom_memory_per_node"
EXTRA_KEY = "extra_slurm"

_MEM_UNIT_RE = re.compile(r"[KMG]$", re.IGNORECASE)
_EXTRA_SPLIT_RE = re.compile(r"\s*,\s*|\n+")


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def directive(body: str) -> str:
    return f"{DIRECTIVE_PREFIX} {body}"


def normalize_memory(value: Any) -> str:
    """Append G to a bare memory amount; K/M/G suffixes are left as written."""
    mem = str(value)
    if not _MEM_UNIT_RE.search(mem):
        mem += "G"
    return mem


def split_extra(value: Any) -> List[str]:
    return [tok.strip() for tok in _EXTRA_SPLIT_RE.split(str(value)) if tok.strip()]


def unique(lines: List[str]) -> List[str]:
    seen = set()
    out = []
    for line in lines:
        if line not in seen:
            seen.add(line)
            out.append(line)
    return out


def assemble_directives(spec: SubmitSpec, options: Mapping[str, Any]) -> List[str]:
    """
    Build the #SBATCH header for one script.

    App-authored native tokens come first, then the submit.yml email, then
    the well-known option keys, memory and extra_slurm. Duplicates are
    collapsed textually, first occurrence wins; two lines setting the same
    flag to different values both survive.
    """
    lines = [directive(opt) for opt in spec.native]

    if _present(spec.email):
        lines.append(directive(f"--mail-user={spec.email}"))

    for key, fmt in KEYED_DIRECTIVES:
        if _present(options.get(key)):
            lines.append(directive(fmt.format(options[key])))

    if _present(options.get(MEMORY_KEY)):
        lines.append(directive(f"--mem={normalize_memory(options[MEMORY_KEY])}"))

    if _present(options.get(EXTRA_KEY)):
        lines.extend(directive(tok) for tok in split_extra(options[EXTRA_KEY]))

    return unique(lines)
