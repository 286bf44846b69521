from __future__ import annotations

from dataclasses import dataclass

import pytest

from roonarr.domain.similarity import (
    EXACT_SCORE,
    HIGH_SIMILARITY_SCORE,
    MODERATE_SIMILARITY_SCORE,
    SUBSTRING_SCORE,
    levenshtein_distance,
    normalize_for_matching,
    score_artist,
    score_candidate,
    score_title,
    select_best_match,
    similarity,
)


@dataclass(frozen=True)
class Candidate:
    match_title: str
    match_artist: str


def test_normalize_strips_punctuation_and_collapses_whitespace() -> None:
    assert normalize_for_matching("  Abbey   Road (Remastered)! ") == "abbey road remastered"
    assert normalize_for_matching("AC/DC") == "acdc"
    assert normalize_for_matching(None) == ""


def test_normalize_keeps_unicode_letters() -> None:
    assert normalize_for_matching("Sigur Rós - Ágætis byrjun") == "sigur rós ágætis byrjun"


def test_levenshtein_distance() -> None:
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0


def test_similarity_is_zero_for_empty_input() -> None:
    assert similarity("", "abc") == 0.0
    assert similarity("abc", "") == 0.0
    assert similarity("abcd", "abcd") == 1.0


@pytest.mark.parametrize(
    ("candidate", "target", "expected"),
    [
        ("abbey road", "abbey road", EXACT_SCORE),
        ("abbey road remastered", "abbey road", SUBSTRING_SCORE),
        ("abbey road", "abbey road super deluxe", SUBSTRING_SCORE),
        ("abbey roan", "abbey road", HIGH_SIMILARITY_SCORE),
        ("abcdefghij", "abcdefgxyz", MODERATE_SIMILARITY_SCORE),
        ("completely different", "abbey road", 0),
    ],
)
def test_score_title_tiers(candidate: str, target: str, expected: int) -> None:
    assert score_title(candidate, target) == expected


def test_score_artist_has_no_moderate_tier() -> None:
    assert score_artist("abcdefghij", "abcdefgxyz") == 0
    assert score_artist("the beatles", "the beatles") == EXACT_SCORE
    assert score_artist("beatles", "the beatles") == SUBSTRING_SCORE


def test_score_candidate_normalises_both_sides() -> None:
    score = score_candidate(
        "Abbey Road",
        "The Beatles",
        target_title="abbey road",
        target_artist="THE BEATLES!",
    )

    assert score == 2 * EXACT_SCORE


def test_select_best_match_accepts_exact_candidate() -> None:
    candidates = [
        Candidate("Let It Be", "The Beatles"),
        Candidate("Abbey Road", "The Beatles"),
    ]

    best = select_best_match(candidates, title="Abbey Road", artist="The Beatles")

    assert best is not None
    assert best.candidate is candidates[1]
    assert best.score == 40


def test_select_best_match_keeps_first_of_equal_scores() -> None:
    first = Candidate("Abbey Road", "The Beatles")
    second = Candidate("Abbey Road", "The Beatles")

    best = select_best_match([first, second], title="Abbey Road", artist="The Beatles")

    assert best is not None
    assert best.candidate is first


def test_select_best_match_rejects_unrelated_candidates() -> None:
    candidates = [Candidate("Something Else", "Nobody")]

    assert select_best_match(candidates, title="Abbey Road", artist="The Beatles") is None


def test_select_best_match_respects_threshold() -> None:
    candidates = [Candidate("abcdefghij", "Nobody")]

    assert select_best_match(candidates, title="abcdefgxyz", artist="The Beatles") is None
    best = select_best_match(candidates, title="abcdefgxyz", artist="The Beatles", threshold=8)
    assert best is not None
    assert best.score == MODERATE_SIMILARITY_SCORE


def test_select_best_match_handles_empty_candidates() -> None:
    assert select_best_match([], title="Abbey Road", artist="The Beatles") is None
