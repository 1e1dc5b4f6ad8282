from __future__ import annotations

from pipelines.runner import RunContext
from services.errors import InputValidationError
from services.extraction import profile_from_search_result


class BuildProfiles:
    """Turn raw search-result items into profile dicts via rule-based extraction."""

    def run(self, ctx: RunContext) -> RunContext:
        built = []
        for item in ctx.results or []:
            if not isinstance(item, dict):
                raise InputValidationError(f"Search result must be an object, got {type(item).__name__}")
            built.append(profile_from_search_result(item).model_dump(exclude_none=True))
        ctx.profiles = list(ctx.profiles or []) + built
        ctx.meta["built_profiles"] = len(built)
        return ctx
