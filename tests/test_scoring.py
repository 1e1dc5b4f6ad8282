from __future__ import annotations

import random

import pytest

from models import ProfileRecord, ScoredProfile
from services.errors import InputValidationError
from services.scoring import TITLE_WEIGHT, rank_by_relevance, score, score_profiles, split_criteria


PROFILES = [
    {"name": "Jane Doe", "title": "Python Developer", "company": "Acme", "skills": ["Django"]},
    {"name": "Erik Andersson", "title": "Sales Lead", "company": "Klarna"},
    {},
    {"title": "Data Engineer", "company": "Python Software Foundation", "url": "https://linkedin.com/in/py"},
]


def test_split_criteria_drops_empties_and_keeps_order():
    assert split_criteria("Java, , Python ,") == ["Java", "Python"]


def test_split_criteria_only_separators_is_empty():
    assert split_criteria(" , ,, ") == []
    assert split_criteria("") == []


def test_split_criteria_rejects_non_text():
    with pytest.raises(InputValidationError):
        split_criteria(None)  # type: ignore[arg-type]
    with pytest.raises(InputValidationError):
        split_criteria(["Java"])  # type: ignore[arg-type]


@pytest.mark.parametrize("criterion", ["python", "acme", "zzz", "a", "Klarna"])
def test_score_is_bounded(criterion, no_jitter, max_jitter):
    for profile in PROFILES:
        for rng in (no_jitter, max_jitter, random.Random(7)):
            value = score(criterion, profile, rng=rng)
            assert 0.0 <= value <= 1.0


def test_no_match_scores_only_jitter(max_jitter):
    profile = {"name": "Jane Doe", "title": "Engineer", "company": "Acme", "skills": ["Go"], "url": "https://x.io/jane"}
    assert score("cobol", profile, rng=max_jitter) < 0.3


def test_title_and_company_match_saturates_at_one(no_jitter, max_jitter):
    profile = {"title": "Head of Python", "company": "Python Labs"}
    assert score("python", profile, rng=no_jitter) == 1.0
    assert score("python", profile, rng=max_jitter) == 1.0


def test_single_field_weights(no_jitter):
    assert score("jane", {"name": "Jane Doe"}, rng=no_jitter) == pytest.approx(0.7)
    assert score("engineer", {"title": "Engineer"}, rng=no_jitter) == pytest.approx(0.8)
    assert score("acme", {"company": "ACME GmbH"}, rng=no_jitter) == pytest.approx(0.8)
    assert score("jane", {"url": "https://linkedin.com/in/jane"}, rng=no_jitter) == pytest.approx(0.3)


def test_skill_weight_counts_once(no_jitter):
    profile = {"skills": ["Python", "python3", "CPython"]}
    assert score("python", profile, rng=no_jitter) == pytest.approx(0.5)


def test_jitter_stays_within_band():
    profile = {"title": "Python Developer"}
    for value in (0.0, 0.25, 0.5, 0.99):
        class _Rng:
            def random(self, v=value):
                return v
        s = score("python", profile, rng=_Rng())
        assert 0.8 <= s <= min(1.0, 0.8 + 0.3)
        assert s == pytest.approx(min(1.0, 0.8 + 0.3 * value))


def test_matching_is_case_insensitive(no_jitter):
    assert score("PYTHON", {"title": "python developer"}, rng=no_jitter) == pytest.approx(0.8)


def test_profile_url_alias_is_read(no_jitter):
    assert score("jane", {"profileUrl": "https://linkedin.com/in/jane"}, rng=no_jitter) == pytest.approx(0.3)


def test_score_accepts_profile_record(no_jitter):
    record = ProfileRecord(name="Jane", title="CTO")
    assert score("cto", record, rng=no_jitter) == pytest.approx(0.8)


def test_score_rejects_bad_input(no_jitter):
    with pytest.raises(InputValidationError):
        score("python", ["not", "a", "profile"], rng=no_jitter)  # type: ignore[arg-type]
    with pytest.raises(InputValidationError):
        score("   ", {"title": "Python"}, rng=no_jitter)
    with pytest.raises(InputValidationError):
        score("python", {"skills": "python"}, rng=no_jitter)


def test_null_skills_count_as_no_skills(no_jitter):
    profile = {"title": "Python dev", "skills": None}
    assert score("python", profile, rng=no_jitter) == pytest.approx(TITLE_WEIGHT)
    ranked = score_profiles("python", [profile], rng=no_jitter)
    assert ranked[0].skills == []
    assert ranked[0].score == pytest.approx(TITLE_WEIGHT)


@pytest.mark.parametrize("jitter", [-0.2, 0.31])
def test_jitter_outside_band_is_rejected(no_jitter, jitter):
    with pytest.raises(InputValidationError):
        score("python", {"title": "Python"}, rng=no_jitter, jitter=jitter)
    with pytest.raises(InputValidationError):
        score_profiles("python", [{"title": "Python"}], rng=no_jitter, jitter=jitter)


def test_rank_orders_by_score_then_confidence():
    ranked = rank_by_relevance([
        {"id": "a", "score": 0.2, "confidence": 5},
        {"id": "b", "score": 0.9, "confidence": 1},
        {"id": "c", "score": 0.9, "confidence": 3},
    ])
    assert [p["id"] for p in ranked] == ["c", "b", "a"]


def test_rank_is_stable_for_full_ties():
    profiles = [
        {"id": 1, "score": 0.5, "confidence": 2},
        {"id": 2, "score": 0.5, "confidence": 2},
        {"id": 3, "score": 0.5, "confidence": 2},
    ]
    assert [p["id"] for p in rank_by_relevance(profiles)] == [1, 2, 3]


def test_rank_treats_missing_confidence_as_zero():
    ranked = rank_by_relevance([
        {"id": "none", "score": 0.5},
        {"id": "neg", "score": 0.5, "confidence": -1},
        {"id": "pos", "score": 0.5, "confidence": 0.1},
    ])
    assert [p["id"] for p in ranked] == ["pos", "none", "neg"]


def test_rank_does_not_mutate_input():
    profiles = [{"score": 0.1}, {"score": 0.9}]
    rank_by_relevance(profiles)
    assert profiles == [{"score": 0.1}, {"score": 0.9}]


def test_score_profiles_uses_mean_over_criteria(no_jitter):
    ranked = score_profiles("python, berlin", [
        {"name": "Anna", "title": "Python Developer", "company": "Acme"},
        {"name": "Bob", "title": "Python Developer", "company": "Berlin Labs"},
    ], rng=no_jitter)
    assert all(isinstance(p, ScoredProfile) for p in ranked)
    assert [p.name for p in ranked] == ["Bob", "Anna"]
    assert ranked[0].score == pytest.approx(0.8)
    assert ranked[1].score == pytest.approx(0.4)


def test_score_profiles_without_criteria_scores_zero(no_jitter):
    ranked = score_profiles(" , ", [{"name": "Anna", "confidence": 1}, {"name": "Bob", "confidence": 2}], rng=no_jitter)
    assert [p.score for p in ranked] == [0.0, 0.0]
    assert [p.name for p in ranked] == ["Bob", "Anna"]


def test_score_profiles_accepts_criteria_list(no_jitter):
    ranked = score_profiles(["python", " "], [{"title": "Python Dev"}], rng=no_jitter)
    assert ranked[0].score == pytest.approx(0.8)
