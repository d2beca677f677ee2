"""
Score Store Test Suite.

Tests for persisting and loading development score history.
"""

import json
import os
import pytest
from datetime import datetime, timezone

from miners.models import RepositoryActivityMetrics
from analyzers.models import DevelopmentScoreResult
from storage.score_store import ScoreStore


def make_result(score, scored_at):
    metrics = RepositoryActivityMetrics(
        repository_name="acme/core",
        star_count=10,
        fork_count=2,
        commits_last_30_days=4,
        contributors_count=3,
        open_issues_count=1,
        closed_issues_count=2,
        last_pushed_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    return DevelopmentScoreResult(
        repository_name="acme/core", score=score, metrics=metrics, scored_at=scored_at
    )


@pytest.fixture
def store(tmp_path):
    return ScoreStore(str(tmp_path / "data"))


def test_load_missing_history(store):
    assert store.load_scores("acme/core") is None


def test_store_and_load_history(store):
    older = make_result(40, datetime(2024, 1, 1, tzinfo=timezone.utc))
    newer = make_result(55, datetime(2024, 2, 1, tzinfo=timezone.utc))

    store.store_score(older)
    store.store_score(newer)

    history = store.load_scores("acme/core")
    assert [result.score for result in history] == [55, 40]
    assert history[0] == newer
    assert history[0].metrics.last_pushed_at == newer.metrics.last_pushed_at

    assert [r.score for r in store.load_scores("acme/core", limit=1)] == [55]


def test_history_file_name_is_safe(store):
    store.store_score(make_result(40, datetime(2024, 1, 1, tzinfo=timezone.utc)))

    assert os.listdir(store.storage_dir) == ["acme_core_development.json"]


def test_corrupted_history_is_replaced(store):
    file_path = store._get_score_file_path("acme/core")
    with open(file_path, "w") as f:
        f.write("{not json")

    store.store_score(make_result(40, datetime(2024, 1, 1, tzinfo=timezone.utc)))

    with open(file_path, "r") as f:
        assert len(json.load(f)) == 1


def test_invalid_entries_are_dropped_on_store(store):
    file_path = store._get_score_file_path("acme/core")
    with open(file_path, "w") as f:
        json.dump([{"score": "high"}], f)

    with pytest.raises(Exception):
        store.load_scores("acme/core")

    store.store_score(make_result(40, datetime(2024, 1, 1, tzinfo=timezone.utc)))

    assert [r.score for r in store.load_scores("acme/core")] == [40]
    assert not os.path.exists(f"{file_path}.tmp")
