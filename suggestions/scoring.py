# src/suggestions/scoring.py
"""
Profile affinity scoring for "suggested connections".

A scorer is any callable ``(requester, candidate) -> int``; the ranking in
``SuggestionService`` does not care how the number is produced. The default
``ProfileAffinityScorer`` is a weighted overlap of profile attributes:

  Signal                          Points
  ──────────────────────────────  ───────────────
  same location                   5
  same education                  4
  same occupation                 3
  shared interests                2 per interest
  shared skills                   1 per skill
  shared languages                1 per language
  preference bonus                +3 each, when the requester lists the
                                  preference and the matching signal fired
                                  (location, education, professional ->
                                  occupation, interests -> any overlap)

Strings and set elements are compared trimmed and case-insensitively; empty
values never match.
"""
from typing import Iterable, Optional, Protocol, Set

from auth.models import User


class AffinityScorer(Protocol):
    def __call__(self, requester: User, candidate: User) -> int: ...


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().casefold()
    return value or None


def _normalized_set(values: Optional[Iterable[str]]) -> Set[str]:
    return {v for v in (_normalize(item) for item in values or []) if v}


def _same(a: Optional[str], b: Optional[str]) -> bool:
    a, b = _normalize(a), _normalize(b)
    return a is not None and a == b


class ProfileAffinityScorer:
    """Weighted attribute-overlap heuristic."""

    LOCATION_POINTS = 5
    EDUCATION_POINTS = 4
    OCCUPATION_POINTS = 3
    INTEREST_POINTS = 2
    SKILL_POINTS = 1
    LANGUAGE_POINTS = 1
    PREFERENCE_BONUS = 3

    def __call__(self, requester: User, candidate: User) -> int:
        preferences = _normalized_set(requester.connection_preferences)

        same_location = _same(requester.location, candidate.location)
        same_education = _same(requester.education, candidate.education)
        same_occupation = _same(requester.occupation, candidate.occupation)
        shared_interests = len(_normalized_set(requester.interests) & _normalized_set(candidate.interests))
        shared_skills = len(_normalized_set(requester.skills) & _normalized_set(candidate.skills))
        shared_languages = len(_normalized_set(requester.languages) & _normalized_set(candidate.languages))

        score = 0
        if same_location:
            score += self.LOCATION_POINTS
        if same_education:
            score += self.EDUCATION_POINTS
        if same_occupation:
            score += self.OCCUPATION_POINTS
        score += self.INTEREST_POINTS * shared_interests
        score += self.SKILL_POINTS * shared_skills
        score += self.LANGUAGE_POINTS * shared_languages

        if "location" in preferences and same_location:
            score += self.PREFERENCE_BONUS
        if "education" in preferences and same_education:
            score += self.PREFERENCE_BONUS
        if "professional" in preferences and same_occupation:
            score += self.PREFERENCE_BONUS
        if "interests" in preferences and shared_interests:
            score += self.PREFERENCE_BONUS
        return score


default_scorer = ProfileAffinityScorer()
