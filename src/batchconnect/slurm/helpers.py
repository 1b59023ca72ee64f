"""
Runtime helper library embedded in every generated script.

The library is a single `source_helpers` bash function that, once called,
defines and exports:

    random_number MIN MAX
    port_used [HOST:]PORT           0 used | 1 free | 127 cannot tell
    find_port [HOST] [MIN] [MAX]    prints a free port | 1 exhausted | 127
    wait_until_port_used PORT [SEC] 0 used | 1 timeout | 127 cannot tell
    create_passwd [LENGTH]          prints an alphanumeric password

`port_used` walks nc, lsof, bash /dev/tcp and a python socket probe and
stops at the first conclusive answer. 127 must never be read as "free".
"""

from __future__ import annotations

from typing import Optional

from batchconnect.app.render import get_package_template_env
from batchconnect.settings import RuntimeDefaults

HELPERS_TEMPLATE = "helpers.sh.j2"
ACTIVATE_CALL = "source_helpers"

PORT_STRATEGIES = (
    "port_used_nc",
    "port_used_lsof",
    "port_used_bash",
    "port_used_python",
)

EXPORTED_HELPERS = (
    "random_number",
    *PORT_STRATEGIES,
    "port_used",
    "find_port",
    "wait_until_port_used",
    "create_passwd",
)


def render_helpers(defaults: Optional[RuntimeDefaults] = None) -> str:
    defaults = defaults or RuntimeDefaults()
    tpl = get_package_template_env().get_template(HELPERS_TEMPLATE)
    return tpl.render(
        min_port=defaults.min_port,
        max_port=defaults.max_port,
        password_size=defaults.password_size,
    )
