"""
Development Scorer Test Suite.

This module contains tests for the DevelopmentActivityScorer, covering:
- Score bounds and integer output
- Monotonicity in contributors and commits
- Archive, fork and staleness penalties
- Empty repositories and idempotence
"""

import pytest
from datetime import datetime, timedelta, timezone

from miners.models import RepositoryActivityMetrics
from analyzers.development import DevelopmentActivityScorer, score_development_activity
from analyzers.models import DevelopmentScoreResult

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_metrics(**overrides):
    values = dict(
        repository_name="acme/core",
        star_count=120,
        fork_count=30,
        commits_last_30_days=12,
        contributors_count=8,
        open_issues_count=5,
        closed_issues_count=15,
        last_pushed_at=NOW - timedelta(days=3),
        is_archived=False,
        is_fork=False,
    )
    values.update(overrides)
    return RepositoryActivityMetrics(**values)


@pytest.fixture
def scorer():
    return DevelopmentActivityScorer()


def test_score_result(scorer):
    """Scoring returns the pass-through metrics and an integer score."""
    metrics = make_metrics()

    result = scorer.score(metrics, NOW)

    assert isinstance(result, DevelopmentScoreResult)
    assert isinstance(result.score, int)
    assert 0 <= result.score <= 100
    assert result.metrics == metrics
    assert result.repository_name == "acme/core"
    assert result.scored_at == NOW


def test_highly_active_repository_scores_near_top(scorer):
    metrics = make_metrics(
        star_count=5000,
        fork_count=800,
        commits_last_30_days=150,
        contributors_count=400,
        open_issues_count=0,
        closed_issues_count=40,
        last_pushed_at=NOW - timedelta(hours=6),
    )

    assert scorer.score(metrics, NOW).score == 100


def test_empty_repository_is_low_but_defined(scorer):
    """All-zero metrics never divide by zero."""
    metrics = make_metrics(
        star_count=0,
        fork_count=0,
        commits_last_30_days=0,
        contributors_count=0,
        open_issues_count=0,
        closed_issues_count=0,
        last_pushed_at=None,
    )

    score = scorer.score(metrics, NOW).score

    assert isinstance(score, int)
    assert 0 <= score <= 40


@pytest.mark.parametrize("field", ["contributors_count", "commits_last_30_days"])
def test_monotonic_in_activity(scorer, field):
    scores = [
        scorer.score(make_metrics(**{field: value}), NOW).score
        for value in [0, 1, 2, 5, 10, 30, 50, 100, 500, 5000]
    ]

    assert scores == sorted(scores)


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"commits_last_30_days": 0, "contributors_count": 0},
        {"last_pushed_at": None},
        {"is_fork": True},
        {"star_count": 0, "fork_count": 0},
    ],
)
def test_archiving_never_increases_score(scorer, overrides):
    active = scorer.score(make_metrics(**overrides), NOW).score
    archived = scorer.score(make_metrics(is_archived=True, **overrides), NOW).score

    assert archived <= active
    assert archived <= 25


def test_fork_penalty(scorer):
    original = scorer.score(make_metrics(), NOW).score
    fork = scorer.score(make_metrics(is_fork=True), NOW).score

    assert fork == original - 10


def test_stale_repository_is_capped(scorer):
    metrics = make_metrics(
        commits_last_30_days=100,
        contributors_count=200,
        star_count=10000,
        last_pushed_at=NOW - timedelta(days=500),
    )

    assert scorer.score(metrics, NOW).score == 40


def test_issue_resolution_rewarded(scorer):
    triaged = scorer.score(
        make_metrics(open_issues_count=2, closed_issues_count=18), NOW
    ).score
    backlog = scorer.score(
        make_metrics(open_issues_count=18, closed_issues_count=2), NOW
    ).score

    assert triaged > backlog


def test_idempotent(scorer):
    metrics = make_metrics()

    assert scorer.score(metrics, NOW) == scorer.score(metrics, NOW)
    assert score_development_activity(metrics, NOW) == scorer.score(metrics, NOW)


@pytest.mark.parametrize(
    "overrides",
    [
        {"star_count": 0, "fork_count": 0, "commits_last_30_days": 0},
        {"contributors_count": 100000, "commits_last_30_days": 100000},
        {"is_archived": True, "is_fork": True, "last_pushed_at": None},
        {"open_issues_count": 1000, "closed_issues_count": 0},
        {"last_pushed_at": NOW + timedelta(days=1)},
    ],
)
def test_bounds(scorer, overrides):
    score = scorer.score(make_metrics(**overrides), NOW).score

    assert isinstance(score, int)
    assert 0 <= score <= 100


def test_naive_timestamps_are_treated_as_utc(scorer):
    aware = scorer.score(make_metrics(), NOW).score
    naive = scorer.score(
        make_metrics(last_pushed_at=(NOW - timedelta(days=3)).replace(tzinfo=None)),
        NOW,
    ).score

    assert aware == naive


def test_negative_counts_are_rejected():
    with pytest.raises(ValueError):
        make_metrics(commits_last_30_days=-1)
