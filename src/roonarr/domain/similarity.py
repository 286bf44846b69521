"""Fuzzy string scoring used to pick the best identity-resolution candidate.

Both the source title/artist and each candidate are normalised (lowercase, no
punctuation, single spaces) and then scored independently on title and on
artist. The title can earn 20 (exact), 15 (substring either way), 12 (edit
similarity above 0.8) or 8 (above 0.6); the artist earns the same except for
the 0.6 tier. A candidate is accepted when the sum reaches ``MATCH_THRESHOLD``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from rapidfuzz.distance import Levenshtein

if TYPE_CHECKING:
    from collections.abc import Iterable

EXACT_SCORE = 20
SUBSTRING_SCORE = 15
HIGH_SIMILARITY_SCORE = 12
MODERATE_SIMILARITY_SCORE = 8
HIGH_SIMILARITY = 0.8
MODERATE_SIMILARITY = 0.6
MATCH_THRESHOLD = 12

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


class MatchCandidate(Protocol):
    @property
    def match_title(self) -> str: ...

    @property
    def match_artist(self) -> str: ...


@dataclass(slots=True, frozen=True)
class ScoredCandidate[T]:
    candidate: T
    score: int


def normalize_for_matching(value: str | None) -> str:
    if not value:
        return ""
    lowered = _PUNCTUATION.sub("", value.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def levenshtein_distance(left: str, right: str) -> int:
    """Classic edit distance with unit cost for insert, delete and substitute."""

    return Levenshtein.distance(left, right)


def similarity(left: str, right: str) -> float:
    if not left or not right:
        return 0.0
    longest = max(len(left), len(right))
    return (longest - levenshtein_distance(left, right)) / longest


def _score_pair(candidate: str, target: str, *, moderate_tier: bool) -> int:
    if candidate == target:
        return EXACT_SCORE
    if candidate in target or target in candidate:
        return SUBSTRING_SCORE
    ratio = similarity(candidate, target)
    if ratio > HIGH_SIMILARITY:
        return HIGH_SIMILARITY_SCORE
    if moderate_tier and ratio > MODERATE_SIMILARITY:
        return MODERATE_SIMILARITY_SCORE
    return 0


def score_title(candidate: str, target: str) -> int:
    """Score two already-normalised titles."""

    return _score_pair(candidate, target, moderate_tier=True)


def score_artist(candidate: str, target: str) -> int:
    """Score two already-normalised artist names."""

    return _score_pair(candidate, target, moderate_tier=False)


def score_candidate(
    candidate_title: str,
    candidate_artist: str,
    *,
    target_title: str,
    target_artist: str,
) -> int:
    return score_title(
        normalize_for_matching(candidate_title), normalize_for_matching(target_title)
    ) + score_artist(
        normalize_for_matching(candidate_artist), normalize_for_matching(target_artist)
    )


def select_best_match[T: MatchCandidate](
    candidates: Iterable[T],
    *,
    title: str,
    artist: str,
    threshold: int = MATCH_THRESHOLD,
) -> ScoredCandidate[T] | None:
    """Return the highest scoring candidate, or ``None`` if it misses ``threshold``.

    Ties keep the earliest candidate, i.e. the lookup service's own ranking.
    """

    best: ScoredCandidate[T] | None = None
    for candidate in candidates:
        score = score_candidate(
            candidate.match_title,
            candidate.match_artist,
            target_title=title,
            target_artist=artist,
        )
        if score > 0 and (best is None or score > best.score):
            best = ScoredCandidate(candidate=candidate, score=score)

    if best is None or best.score < threshold:
        return None
    return best
