from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ProfileRecord(BaseModel):
    """Candidate profile as handed to the scorer: every field optional."""

    name: str | None = None
    title: str | None = None
    company: str | None = None
    url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("url", "profileUrl", "profile_url", "link"),
    )
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    confidence: float | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _none_skills(cls, value: Any) -> Any:
        return [] if value is None else value
