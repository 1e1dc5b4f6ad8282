from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol, List, Optional

from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    criteria: Optional[str] = None
    results: list = field(default_factory=list)
    profiles: list = field(default_factory=list)
    ranked: list = field(default_factory=list)
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            t0 = time.time()
            ctx = step.run(ctx)
            logger.debug(
                "step finished",
                extra={"step": type(step).__name__, "status": "ok",
                       "duration_ms": int((time.time() - t0) * 1000)},
            )
        return ctx
