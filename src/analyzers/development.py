"""
Development Activity Scoring Module.

Turns repository activity metrics into the 0-100 development pillar score.
The score is built from a baseline plus bounded contributions:

- contributors, with diminishing returns past 50
- commits in the last 30 days, saturating at 30
- issue resolution ratio
- popularity (stars and forks) and push freshness

followed by fork and archive penalties and a cap for repositories that have
not been pushed to in over a year. Scoring is pure: the same metrics and
reference time always give the same score.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from config import logger
from miners.models import RepositoryActivityMetrics
from analyzers.models import DevelopmentScoreResult

BASE_SCORE = 20.0

CONTRIBUTORS_WEIGHT = 20.0
CONTRIBUTORS_SATURATION = 50

COMMITS_WEIGHT = 25.0
COMMITS_SATURATION = 30

ISSUES_WEIGHT = 15.0
# No issues at all says nothing either way
NO_ISSUES_SCORE = ISSUES_WEIGHT / 2

POPULARITY_WEIGHT = 10.0
POPULARITY_SATURATION = 1000

# (max days since push, points)
FRESHNESS_TIERS = ((7, 10.0), (30, 8.0), (90, 5.0), (180, 2.0))

FORK_PENALTY = 10.0
ARCHIVED_PENALTY = 20.0
ARCHIVED_CAP = 25.0

STALE_AFTER_DAYS = 365
STALE_CAP = 40.0


def _saturating_log(value: int, saturation: int) -> float:
    return min(1.0, math.log1p(value) / math.log1p(saturation))


def _days_since(timestamp: Optional[datetime], now: datetime) -> Optional[float]:
    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return max(0.0, (now - timestamp).total_seconds() / 86400)


class DevelopmentActivityScorer:
    """
    Scores repository development health.

    Stateless; one instance can score any number of repositories.
    """

    def contributors_points(self, contributors_count: int) -> float:
        return CONTRIBUTORS_WEIGHT * _saturating_log(
            contributors_count, CONTRIBUTORS_SATURATION
        )

    def commits_points(self, commits: int) -> float:
        return COMMITS_WEIGHT * min(commits, COMMITS_SATURATION) / COMMITS_SATURATION

    def issues_points(self, metrics: RepositoryActivityMetrics) -> float:
        if metrics.total_issues == 0:
            return NO_ISSUES_SCORE
        return ISSUES_WEIGHT * metrics.closed_issues_count / max(1, metrics.total_issues)

    def popularity_points(self, metrics: RepositoryActivityMetrics) -> float:
        return POPULARITY_WEIGHT * _saturating_log(
            metrics.star_count + metrics.fork_count, POPULARITY_SATURATION
        )

    def freshness_points(self, days_since_push: Optional[float]) -> float:
        if days_since_push is None:
            return 0.0
        for max_days, points in FRESHNESS_TIERS:
            if days_since_push < max_days:
                return points
        return 0.0

    def score(
        self, metrics: RepositoryActivityMetrics, now: Optional[datetime] = None
    ) -> DevelopmentScoreResult:
        """
        Compute the development score of a repository.

        Args:
            metrics (RepositoryActivityMetrics): Repository activity facts
            now (Optional[datetime]): Reference time, defaults to current UTC time

        Returns:
            DevelopmentScoreResult: Integer score in [0, 100] with the metrics
        """
        now = now or datetime.now(timezone.utc)
        days_since_push = _days_since(metrics.last_pushed_at, now)

        score = (
            BASE_SCORE
            + self.contributors_points(metrics.contributors_count)
            + self.commits_points(metrics.commits_last_30_days)
            + self.issues_points(metrics)
            + self.popularity_points(metrics)
            + self.freshness_points(days_since_push)
        )

        if metrics.is_fork:
            score -= FORK_PENALTY

        if metrics.is_archived:
            score = min(score - ARCHIVED_PENALTY, ARCHIVED_CAP)

        if days_since_push is None or days_since_push > STALE_AFTER_DAYS:
            score = min(score, STALE_CAP)

        final_score = int(round(max(0.0, min(100.0, score))))

        logger.debug(
            {
                "message": "Development score calculated",
                "repository": metrics.repository_name,
                "score": final_score,
                "commits_30d": metrics.commits_last_30_days,
                "contributors": metrics.contributors_count,
                "issues": f"{metrics.open_issues_count}/{metrics.closed_issues_count}",
                "days_since_push": days_since_push,
            }
        )

        return DevelopmentScoreResult(
            repository_name=metrics.repository_name,
            score=final_score,
            metrics=metrics,
            scored_at=now,
        )


def score_development_activity(
    metrics: RepositoryActivityMetrics, now: Optional[datetime] = None
) -> DevelopmentScoreResult:
    """Score ``metrics`` with a default DevelopmentActivityScorer."""
    return DevelopmentActivityScorer().score(metrics, now)
