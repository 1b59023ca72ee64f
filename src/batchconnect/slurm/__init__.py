"""
SLURM script assembly: directive header, runtime helpers, body.
"""
from .directives import assemble_directives
from .body import Fragments, compose_body, parse_conn_params
from .helpers import render_helpers
from .script import assemble_script
