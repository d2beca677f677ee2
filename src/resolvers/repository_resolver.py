"""
Repository Resolution Module.

Finds the repository that best represents a token project's primary codebase.
Token metadata often links to a GitHub organization rather than a repository,
and organizations host SDKs, docs sites, deployment scripts and old protocol
versions next to the contracts that matter. Candidates are ranked by:

- type score: keyword heuristics over the name and description
- version score: the highest major version wins among versioned repositories
- activity score: recency of the last push
- star count, capped so popularity only breaks ties

Each factor strictly dominates the ones after it.
"""

import re
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Union

from config import logger
from miners.models import OwnerType, RepositoryCandidate
from resolvers.github_urls import parse_github_url
from resolvers.models import ResolutionFailure, ResolvedRepository

FetchOwnerRepos = Callable[
    [str, OwnerType], Awaitable[Optional[List[RepositoryCandidate]]]
]

CORE_KEYWORDS = ("core", "protocol", "contracts", "main")
DESCRIPTION_KEYWORDS = ("main", "core", "primary", "protocol", "smart contract")

EXACT_CORE_BONUS = 5000
CONTAINS_CORE_BONUS = 3000
CORE_SUFFIX_BONUS = 2500
OWNER_FRAGMENT_BONUS = 1500
DESCRIPTION_BONUS = 500

# (penalty, name tokens)
NAME_PENALTIES = (
    (3000, {"erc20", "erc721", "erc1155", "utils", "util", "common", "shared", "helpers", "lib"}),
    (4000, {"docs", "doc", "documentation", "example", "examples", "demo", "template", "tutorial", "website"}),
    (2000, {"test", "tests", "testing", "tools", "tooling", "scripts", "ci", "actions", "bot"}),
    (5000, {"legacy", "deprecated", "archived", "old"}),
)
LEGACY_DESCRIPTION_PATTERN = re.compile(r"\b(legacy|deprecated|archived)\b")

VERSION_PATTERNS = (
    re.compile(r"[-_]?v(\d+)$"),
    re.compile(r"v(\d+)[-_]"),
    re.compile(r"[-_]?(\d+)$"),
)
LATEST_KEYWORDS = ("latest", "current")
MAX_VERSION = 999

# (max days since push, tier)
ACTIVITY_TIERS = ((7, 3), (30, 2), (180, 1))

TYPE_WEIGHT = 100000
VERSION_WEIGHT = 10000
ACTIVITY_WEIGHT = 1000
STAR_CAP = 500


def _name_tokens(name: str) -> set:
    return {token for token in re.split(r"[-_.\s]+", name) if token}


def owner_fragments(owner: str) -> List[str]:
    """Meaningful pieces of an owner login, e.g. "uniswap-labs" -> uniswap, labs."""
    owner = owner.lower()
    fragments = [owner] + re.split(r"[-_.]+", owner)
    unique = []
    for fragment in fragments:
        if len(fragment) > 2 and fragment not in unique:
            unique.append(fragment)
    return unique


def type_score(candidate: RepositoryCandidate) -> int:
    """Score how much a repository looks like the project's core codebase."""
    name = candidate.name.lower()
    description = (candidate.description or "").lower()
    tokens = _name_tokens(name)
    score = 0

    if name in CORE_KEYWORDS:
        score += EXACT_CORE_BONUS
    elif any(name.endswith(f"-{keyword}") for keyword in CORE_KEYWORDS):
        score += CORE_SUFFIX_BONUS
    elif any(keyword in name for keyword in CORE_KEYWORDS):
        score += CONTAINS_CORE_BONUS

    for fragment in owner_fragments(candidate.owner):
        if fragment in name:
            score += OWNER_FRAGMENT_BONUS

    if any(keyword in description for keyword in DESCRIPTION_KEYWORDS):
        score += DESCRIPTION_BONUS

    for penalty, keywords in NAME_PENALTIES:
        if tokens & keywords:
            score -= penalty
    if not tokens & NAME_PENALTIES[-1][1] and LEGACY_DESCRIPTION_PATTERN.search(
        description
    ):
        score -= NAME_PENALTIES[-1][0]

    return score


def version_score(candidate: RepositoryCandidate) -> int:
    """Major version embedded in the repository name, 0 if there is none."""
    name = candidate.name.lower()
    for pattern in VERSION_PATTERNS:
        match = pattern.search(name)
        if match:
            return min(int(match.group(1)), MAX_VERSION)
    if any(keyword in name for keyword in LATEST_KEYWORDS):
        return MAX_VERSION
    return 0


def activity_score(
    candidate: RepositoryCandidate, now: Optional[datetime] = None
) -> int:
    """Recency tier of the last push, 0 when stale or unknown."""
    if candidate.last_pushed_at is None:
        return 0
    now = now or datetime.now(timezone.utc)
    pushed_at = candidate.last_pushed_at
    if pushed_at.tzinfo is None:
        pushed_at = pushed_at.replace(tzinfo=timezone.utc)
    days = (now - pushed_at).total_seconds() / 86400
    for max_days, tier in ACTIVITY_TIERS:
        if days <= max_days:
            return tier
    return 0


def candidate_rank(
    candidate: RepositoryCandidate, now: Optional[datetime] = None
) -> int:
    """Combined weighted score; higher is a better primary repository."""
    return (
        type_score(candidate) * TYPE_WEIGHT
        + version_score(candidate) * VERSION_WEIGHT
        + activity_score(candidate, now) * ACTIVITY_WEIGHT
        + min(candidate.star_count, STAR_CAP)
    )


def select_repository(
    candidates: List[RepositoryCandidate], now: Optional[datetime] = None
) -> Optional[RepositoryCandidate]:
    """
    Pick the primary repository among an owner's repositories.

    Forks are only considered when the owner has no original repositories.
    Ties keep the listing order.

    Args:
        candidates (List[RepositoryCandidate]): Repositories in fetch order
        now (Optional[datetime]): Reference time for recency, defaults to now

    Returns:
        Optional[RepositoryCandidate]: The winner, or None for an empty list
    """
    if not candidates:
        return None
    now = now or datetime.now(timezone.utc)

    pool = [candidate for candidate in candidates if not candidate.is_fork]
    if not pool:
        pool = list(candidates)

    ranked = sorted(pool, key=lambda c: candidate_rank(c, now), reverse=True)

    logger.debug(
        {
            "message": "Ranked repository candidates",
            "top": [
                {"repository": c.full_name, "rank": candidate_rank(c, now)}
                for c in ranked[:5]
            ],
        }
    )
    return ranked[0]


class RepositoryResolver:
    """
    Resolves token project GitHub URLs to a single repository.

    Attributes:
        fetch_owner_repos (FetchOwnerRepos): Lists an owner's repositories for
            a given owner type; returns None when the listing is unavailable
    """

    def __init__(self, fetch_owner_repos: FetchOwnerRepos):
        self.fetch_owner_repos = fetch_owner_repos

    async def _list_candidates(self, owner: str) -> List[RepositoryCandidate]:
        for owner_type in OwnerType:
            try:
                candidates = await self.fetch_owner_repos(owner, owner_type)
            except Exception as e:
                logger.warning(
                    {
                        "message": "Owner repository listing failed",
                        "owner": owner,
                        "owner_type": owner_type.value,
                        "error": str(e),
                    }
                )
                continue
            if candidates:
                return candidates
        return []

    async def resolve(
        self, url: Optional[str], now: Optional[datetime] = None
    ) -> Union[ResolvedRepository, ResolutionFailure]:
        """
        Resolve a GitHub URL to the project's primary repository.

        Repository URLs are returned as-is without listing anything.
        Organization or user URLs are resolved by ranking the owner's
        repositories, trying the organization listing before the user one.

        Args:
            url (Optional[str]): GitHub URL from token metadata
            now (Optional[datetime]): Reference time for recency ranking

        Returns:
            Union[ResolvedRepository, ResolutionFailure]: The repository, or
                INVALID_URL / NOT_FOUND
        """
        parsed = parse_github_url(url)
        if parsed is None:
            logger.info({"message": "Invalid GitHub URL", "url": url})
            return ResolutionFailure.INVALID_URL

        if parsed.is_repository:
            return ResolvedRepository(owner=parsed.owner, repo=parsed.repo)

        candidates = await self._list_candidates(parsed.owner)
        winner = select_repository(candidates, now)
        if winner is None:
            logger.info(
                {"message": "No repositories found for owner", "owner": parsed.owner}
            )
            return ResolutionFailure.NOT_FOUND

        logger.info(
            {
                "message": "Resolved primary repository",
                "url": url,
                "repository": winner.full_name,
                "candidates": len(candidates),
            }
        )
        return ResolvedRepository(owner=winner.owner, repo=winner.name)


async def resolve_repository(
    url: Optional[str],
    fetch_owner_repos: FetchOwnerRepos,
    now: Optional[datetime] = None,
) -> Union[ResolvedRepository, ResolutionFailure]:
    """Resolve ``url`` with a one-off RepositoryResolver."""
    return await RepositoryResolver(fetch_owner_repos).resolve(url, now)
