"""
Form parameters and their resolution into an option set.
"""
from .types import OptionSet, ParameterSpec
from .resolve import parse_schema, resolve_options
