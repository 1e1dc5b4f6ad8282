from __future__ import annotations

from pydantic import Field

from .profile_record import ProfileRecord


class ScoredProfile(ProfileRecord):
    """ProfileRecord annotated with its relevance score."""

    score: float = Field(default=0.0, ge=0.0, le=1.0)
