from __future__ import annotations

from typing import Optional

from config.settings import get_settings
from pipelines.runner import RunContext
from ports import RandomSource
from services.scoring import score_profiles


class ScoreProfiles:
    def __init__(self, rng: Optional[RandomSource] = None, jitter: Optional[float] = None) -> None:
        self.rng = rng
        self.jitter = jitter if jitter is not None else get_settings().scoring_jitter

    def run(self, ctx: RunContext) -> RunContext:
        ctx.ranked = score_profiles(ctx.criteria or "", ctx.profiles or [], rng=self.rng, jitter=self.jitter)
        ctx.meta["scored_profiles"] = len(ctx.ranked)
        return ctx
