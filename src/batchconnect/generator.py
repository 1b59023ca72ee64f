"""
batchconnect | generator.py

Drives one generation call:

    form attributes + overrides -> OptionSet
    submit.yml.j2 (rendered)    -> SubmitSpec -> #SBATCH lines
    fragments (rendered)        -> body
    header + body               -> script text
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from batchconnect.app.repo import AppRepo
from batchconnect.options import OptionSet, parse_schema, resolve_options
from batchconnect.schemas.models import SubmitSpec
from batchconnect.settings import RuntimeDefaults
from batchconnect.slurm.body import Fragments, compose_body
from batchconnect.slurm.directives import assemble_directives
from batchconnect.slurm.script import assemble_script


@dataclass
class BatchScriptGenerator:
    """
    Turns an AppRepo plus user overrides into a self-contained SLURM script.

    Holds no per-call state; `generate` may be called any number of times.
    """

    app: AppRepo
    defaults: RuntimeDefaults = field(default_factory=RuntimeDefaults)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("batchconnect"))

    def __post_init__(self):
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[batchconnect] %(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    # -----------------------------------------------------------------------
    def resolve(self, overrides: Optional[Mapping[str, Any]] = None) -> OptionSet:
        schema = parse_schema(self.app.attributes)
        options = resolve_options(schema, overrides)
        self.logger.debug("resolved %d option(s) from %d declared parameter(s)", len(options), len(schema))
        return options

    def submit_spec(self, options: OptionSet) -> SubmitSpec:
        return SubmitSpec.model_validate(self.app.render_submit(options.as_dict()))

    def fragments(self, options: OptionSet) -> Fragments:
        ctx = options.as_dict()
        return Fragments(
            before=self.app.render_fragment("before.sh", ctx),
            run=self.app.render_fragment("script.sh", ctx),
            after=self.app.render_fragment("after.sh", ctx),
        )

    def generate(self, overrides: Optional[Mapping[str, Any]] = None) -> str:
        options = self.resolve(overrides)
        directives = assemble_directives(self.submit_spec(options), options)
        body = compose_body(options, self.fragments(options), self.defaults)
        self.logger.info("generated script for %s (%d directive line(s))", self.app.root.name, len(directives))
        return assemble_script(directives, body)
