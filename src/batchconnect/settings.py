# batchconnect/settings.py

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# ---------------------------------------------------------------------------
# RUNTIME HELPER DEFAULTS
# ---------------------------------------------------------------------------
DEFAULT_MIN_PORT = 2000
DEFAULT_MAX_PORT = 65_535
DEFAULT_PASSWORD_SIZE = 32

ENV_PREFIX = "BATCHCONNECT_"


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got: {raw!r}") from e


@dataclass(frozen=True)
class RuntimeDefaults:
    """
    Numeric defaults baked into the helper library of every generated script.
    """

    min_port: int = DEFAULT_MIN_PORT
    max_port: int = DEFAULT_MAX_PORT
    password_size: int = DEFAULT_PASSWORD_SIZE

    def __post_init__(self):
        if not 1 <= self.min_port <= self.max_port <= 65_535:
            raise ValueError(
                f"Invalid port range {self.min_port}..{self.max_port} "
                "(expected 1 <= min <= max <= 65535)"
            )
        if self.password_size <= 0:
            raise ValueError(f"password_size must be positive, got {self.password_size}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeDefaults":
        env = os.environ if environ is None else environ
        return cls(
            min_port=_env_int(env, "MIN_PORT", DEFAULT_MIN_PORT),
            max_port=_env_int(env, "MAX_PORT", DEFAULT_MAX_PORT),
            password_size=_env_int(env, "PASSWORD_SIZE", DEFAULT_PASSWORD_SIZE),
        )

    def with_overrides(
        self,
        min_port: Optional[int] = None,
        max_port: Optional[int] = None,
        password_size: Optional[int] = None,
    ) -> "RuntimeDefaults":
        return RuntimeDefaults(
            min_port=self.min_port if min_port is None else min_port,
            max_port=self.max_port if max_port is None else max_port,
            password_size=self.password_size if password_size is None else password_size,
        )
