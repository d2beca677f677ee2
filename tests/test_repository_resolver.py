"""
Repository Resolver Test Suite.

This module contains tests for resolving GitHub URLs to a primary repository,
covering:
- Direct repository URLs and invalid input
- Organization/user listing fallback
- Candidate ranking (forks, keywords, versions, activity, stars)
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from miners.models import OwnerType, RepositoryCandidate
from resolvers.models import ResolutionFailure, ResolvedRepository
from resolvers.repository_resolver import (
    RepositoryResolver,
    activity_score,
    resolve_repository,
    select_repository,
    type_score,
    version_score,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_candidate(
    name,
    owner="acme",
    description=None,
    is_fork=False,
    star_count=0,
    pushed_days_ago=None,
):
    return RepositoryCandidate(
        name=name,
        owner=owner,
        description=description,
        is_fork=is_fork,
        star_count=star_count,
        last_pushed_at=(
            NOW - timedelta(days=pushed_days_ago)
            if pushed_days_ago is not None
            else None
        ),
    )


@pytest.fixture
def fetcher():
    """Owner listing fetcher that should not be needed."""
    return AsyncMock(return_value=None)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url, owner, repo",
    [
        ("https://github.com/acme/widget", "acme", "widget"),
        ("https://github.com/acme/widget.git", "acme", "widget"),
        ("http://www.github.com/acme/widget", "acme", "widget"),
        ("github.com/acme/widget/tree/main/contracts", "acme", "widget"),
        ("https://github.com/acme/widget?tab=readme", "acme", "widget"),
    ],
)
async def test_direct_url_short_circuits(fetcher, url, owner, repo):
    """Repository URLs resolve without listing the owner's repositories."""
    result = await resolve_repository(url, fetcher)

    assert result == ResolvedRepository(owner=owner, repo=repo)
    fetcher.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url",
    [
        "not a url",
        "https://example.com",
        "https://gitlab.com/acme",
        "https://notgithub.com/acme/widget",
        "https://gist.github.com/acme/0123abcd",
        "",
        None,
    ],
)
async def test_invalid_url(fetcher, url):
    """Non-GitHub input is reported as an invalid URL."""
    result = await resolve_repository(url, fetcher)

    assert result is ResolutionFailure.INVALID_URL
    fetcher.assert_not_called()


@pytest.mark.asyncio
async def test_empty_organization_is_not_found():
    """Both listings empty means the owner has no repositories."""
    fetcher = AsyncMock(return_value=[])

    result = await resolve_repository("https://github.com/acme", fetcher)

    assert result is ResolutionFailure.NOT_FOUND
    assert [call.args for call in fetcher.call_args_list] == [
        ("acme", OwnerType.ORGANIZATION),
        ("acme", OwnerType.USER),
    ]


@pytest.mark.asyncio
async def test_listing_errors_are_treated_as_no_candidates():
    """Fetcher exceptions fall through to the next listing, never propagate."""
    fetcher = AsyncMock(side_effect=[Exception("boom"), None])

    result = await resolve_repository("https://github.com/acme/", fetcher)

    assert result is ResolutionFailure.NOT_FOUND
    assert fetcher.call_count == 2


@pytest.mark.asyncio
async def test_falls_back_to_user_listing():
    """A user account is listed after the organization lookup fails."""

    async def fetch(owner, owner_type):
        if owner_type is OwnerType.ORGANIZATION:
            return None
        return [make_candidate("dotfiles", owner=owner), make_candidate("core", owner=owner)]

    result = await resolve_repository("https://github.com/acme", fetch)

    assert result == ResolvedRepository(owner="acme", repo="core")


@pytest.mark.asyncio
async def test_orgs_profile_url_is_an_owner_url():
    """github.com/orgs/{owner} lists the organization instead of a repo named after it."""
    fetcher = AsyncMock(return_value=[make_candidate("contracts")])

    result = await RepositoryResolver(fetcher).resolve(
        "https://github.com/orgs/acme", now=NOW
    )

    assert result == ResolvedRepository(owner="acme", repo="contracts")
    fetcher.assert_called_once_with("acme", OwnerType.ORGANIZATION)


def test_fork_exclusion():
    """A fork never wins while an original repository exists."""
    candidates = [
        make_candidate("acme-core", is_fork=True, star_count=50000, pushed_days_ago=0),
        make_candidate("website-old", star_count=1, pushed_days_ago=900),
    ]

    winner = select_repository(candidates, NOW)

    assert winner.name == "website-old"


def test_forks_used_when_no_original_repository():
    candidates = [
        make_candidate("docs", is_fork=True),
        make_candidate("contracts", is_fork=True),
    ]

    assert select_repository(candidates, NOW).name == "contracts"


def test_keyword_dominance():
    """Core-looking names beat fresher, more popular docs repositories."""
    candidates = [
        make_candidate(
            "my-protocol-docs", owner="my-protocol", star_count=500, pushed_days_ago=1
        ),
        make_candidate(
            "my-protocol-core", owner="my-protocol", star_count=10, pushed_days_ago=200
        ),
    ]

    winner = select_repository(candidates, NOW)

    assert winner.name == "my-protocol-core"


def test_exact_core_name_beats_suffix_name():
    candidates = [
        make_candidate("xy-protocol", owner="zz", star_count=300, pushed_days_ago=1),
        make_candidate("protocol", owner="zz", star_count=2, pushed_days_ago=60),
    ]

    assert select_repository(candidates, NOW).name == "protocol"


def test_version_tie_break():
    candidates = [make_candidate("widget-v1"), make_candidate("widget-v2")]

    assert select_repository(candidates, NOW).name == "widget-v2"


def test_activity_then_stars_break_ties():
    candidates = [
        make_candidate("alpha", star_count=400, pushed_days_ago=100),
        make_candidate("beta", star_count=5, pushed_days_ago=3),
        make_candidate("gamma", star_count=100, pushed_days_ago=3),
    ]

    assert select_repository(candidates, NOW).name == "gamma"


def test_ties_keep_fetch_order():
    candidates = [make_candidate("first"), make_candidate("second")]

    assert select_repository(candidates, NOW).name == "first"


def test_select_from_empty_list():
    assert select_repository([], NOW) is None


def test_type_score_keywords():
    assert type_score(make_candidate("core")) == 5000
    assert type_score(make_candidate("smart-contracts-v2")) == 3000
    assert type_score(make_candidate("x-protocol")) == 2500
    assert type_score(make_candidate("acme-token")) == 1500
    assert (
        type_score(make_candidate("sdk", description="The primary SDK for Acme")) == 500
    )


def test_type_score_penalties():
    assert type_score(make_candidate("erc20")) == -3000
    assert type_score(make_candidate("docs")) == -4000
    assert type_score(make_candidate("ci-scripts")) == -2000
    assert type_score(make_candidate("legacy")) == -5000
    assert type_score(make_candidate("sdk", description="Deprecated, see v2")) == -5000


def test_version_score():
    assert version_score(make_candidate("widget-v3")) == 3
    assert version_score(make_candidate("widget_v12")) == 12
    assert version_score(make_candidate("uniswap-v3-core")) == 3
    assert version_score(make_candidate("router2")) == 2
    assert version_score(make_candidate("latest-contracts")) == 999
    assert version_score(make_candidate("widget")) == 0


def test_activity_score_tiers():
    assert activity_score(make_candidate("a", pushed_days_ago=2), NOW) == 3
    assert activity_score(make_candidate("a", pushed_days_ago=20), NOW) == 2
    assert activity_score(make_candidate("a", pushed_days_ago=120), NOW) == 1
    assert activity_score(make_candidate("a", pushed_days_ago=400), NOW) == 0
    assert activity_score(make_candidate("a"), NOW) == 0
