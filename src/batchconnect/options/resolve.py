# batchconnect/options/resolve.py

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from batchconnect.options.types import OptionSet, ParameterSpec

log = logging.getLogger(__name__)


def parse_schema(attributes: Optional[Mapping[str, Any]]) -> List[ParameterSpec]:
    """
    Build ParameterSpecs from the `attributes` block of a form document.

    Entries that are not mappings (fixed scalars, half-written entries)
    are skipped.
    """
    specs: List[ParameterSpec] = []
    for name, raw in (attributes or {}).items():
        if not isinstance(raw, dict):
            log.debug("skipping malformed form attribute %r", name)
            continue
        specs.append(ParameterSpec.from_mapping(name, raw))
    return specs


def resolve_options(
    schema: Iterable[ParameterSpec],
    overrides: Optional[Mapping[str, Any]] = None,
) -> OptionSet:
    """
    Merge declared parameters with caller overrides.

    Pass 1: override or default per declared parameter, label -> value,
            unset parameters dropped.
    Pass 2: undeclared override keys copied through untouched.
    """
    overrides = dict(overrides or {})
    merged: Dict[str, Any] = {}

    for spec in schema:
        value = overrides[spec.name] if spec.name in overrides else spec.default_value
        value = spec.translate(value)
        if value is not None:
            merged[spec.name] = value

    for key, value in overrides.items():
        if key not in merged:
            merged[key] = value

    return OptionSet(merged)
