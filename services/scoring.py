from __future__ import annotations

import logging
import random
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from models import ProfileRecord, ScoredProfile
from ports import RandomSource
from services.errors import InputValidationError


logger = logging.getLogger(__name__)

NAME_WEIGHT = 0.7
TITLE_WEIGHT = 0.8
COMPANY_WEIGHT = 0.8
SKILL_WEIGHT = 0.5
URL_WEIGHT = 0.3
JITTER = 0.3

_default_rng = random.Random()

ProfileLike = Union[ProfileRecord, Mapping[str, Any]]


def split_criteria(raw: str) -> List[str]:
    """Split a comma-separated criteria string into trimmed, non-empty items."""
    if not isinstance(raw, str):
        raise InputValidationError(f"criteria must be a string, got {type(raw).__name__}")
    return [item.strip() for item in raw.split(",") if item.strip()]


def _as_profile(profile: ProfileLike) -> ProfileRecord:
    if isinstance(profile, ProfileRecord):
        return profile
    if isinstance(profile, Mapping):
        try:
            return ProfileRecord.model_validate(dict(profile))
        except ValidationError as e:
            raise InputValidationError(f"invalid profile: {e}") from e
    raise InputValidationError(f"profile must be a mapping, got {type(profile).__name__}")


def _check_jitter(jitter: float) -> None:
    if not 0.0 <= jitter <= JITTER:
        raise InputValidationError(f"jitter must be between 0 and {JITTER}, got {jitter!r}")


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def score(
    criterion: str,
    profile: ProfileLike,
    rng: Optional[RandomSource] = None,
    jitter: float = JITTER,
) -> float:
    """Heuristic match strength between one criterion and one profile, in [0, 1].

    Field hits are additive; a jitter term in [0, jitter) breaks ties between
    otherwise equal profiles.
    """
    if not isinstance(criterion, str) or not criterion.strip():
        raise InputValidationError("criterion must be a non-empty string")
    _check_jitter(jitter)
    record = _as_profile(profile)
    needle = criterion.strip().lower()

    total = 0.0
    if _contains(record.name, needle):
        total += NAME_WEIGHT
    if _contains(record.title, needle):
        total += TITLE_WEIGHT
    if _contains(record.company, needle):
        total += COMPANY_WEIGHT
    for skill in record.skills:
        if _contains(skill, needle):
            total += SKILL_WEIGHT
            break
    if _contains(record.url, needle):
        total += URL_WEIGHT

    total += jitter * (rng or _default_rng).random()
    return min(total, 1.0)


def _sort_key_value(item: Any, key: str) -> float:
    if isinstance(item, Mapping):
        value = item.get(key)
    else:
        value = getattr(item, key, None)
    return float(value or 0)


def rank_by_relevance(profiles: Iterable[Any]) -> List[Any]:
    """Sort by score desc, then confidence desc; ties keep input order."""
    return sorted(
        profiles,
        key=lambda p: (-_sort_key_value(p, "score"), -_sort_key_value(p, "confidence")),
    )


def score_profiles(
    criteria: Union[str, Sequence[str]],
    profiles: Iterable[ProfileLike],
    rng: Optional[RandomSource] = None,
    jitter: float = JITTER,
) -> List[ScoredProfile]:
    """Score each profile as the mean over all criteria and rank the result."""
    _check_jitter(jitter)
    if isinstance(criteria, str):
        items = split_criteria(criteria)
    else:
        criteria = list(criteria)
        if not all(isinstance(c, str) for c in criteria):
            raise InputValidationError("criteria must be strings")
        items = [c.strip() for c in criteria if c.strip()]
    scored: List[ScoredProfile] = []
    for profile in profiles:
        record = _as_profile(profile)
        if items:
            value = min(sum(score(c, record, rng=rng, jitter=jitter) for c in items) / len(items), 1.0)
        else:
            value = 0.0
        scored.append(ScoredProfile(**record.model_dump(exclude={"score"}), score=value))
    logger.info(
        f"Scored {len(scored)} profiles against {len(items)} criteria",
        extra={"step": "score_profiles", "status": "ok"},
    )
    return rank_by_relevance(scored)
