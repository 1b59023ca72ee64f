"""
batchconnect

Generate self-contained SLURM batch scripts from batch-connect app
definitions (form.yml + submit.yml + before/script/after fragments).
"""

__version__ = "0.1.0"

from .generator import BatchScriptGenerator
from .app import AppRepo
from .options import OptionSet, ParameterSpec, parse_schema, resolve_options
from .settings import RuntimeDefaults

__all__ = [
    "BatchScriptGenerator",
    "AppRepo",
    "OptionSet",
    "ParameterSpec",
    "parse_schema",
    "resolve_options",
    "RuntimeDefaults",
]
