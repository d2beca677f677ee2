"""
GitHub Repository Data Mining Module.

This module fetches the raw GitHub data the development pillar is computed
from: an owner's repository listing (for resolution) and one repository's
activity facts (for scoring). API objects are converted to Pydantic models at
this boundary, and data that cannot be fetched is reported as None rather than
as zero counts.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Tuple

from github import Auth, Github, GithubException
from github.Repository import Repository
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    stop_before_delay,
    wait_exponential,
)

from config import settings, logger
from miners.base import RepositoryMiner
from miners.models import OwnerType, RepositoryActivityMetrics, RepositoryCandidate
from miners.rate_limiter import RateLimiter
from miners.timeouts import safe_api_call

ISSUE_SAMPLE_SIZE = 100
RETRY_ATTEMPTS = 3
RETRY_MAX_WAIT = 4


def _is_transient(exception: BaseException) -> bool:
    """Server-side GitHub failures are worth retrying; 4xx answers are not."""
    return (
        isinstance(exception, GithubException)
        and exception.status is not None
        and exception.status >= 500
    )


def transient_retry(budget: float):
    """Retry 5xx failures, never starting an attempt after ``budget`` seconds."""
    return retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(RETRY_ATTEMPTS) | stop_before_delay(budget),
        wait=wait_exponential(multiplier=1, min=1, max=RETRY_MAX_WAIT),
        reraise=True,
    )


class GitHubMiner(RepositoryMiner):
    """
    GitHubMiner lists owner repositories and collects repository activity
    metrics through the GitHub REST API.
    """

    def __init__(
        self,
        github_token: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: Optional[float] = None,
        max_candidates: Optional[int] = None,
        commit_window_days: Optional[int] = None,
    ):
        """Initialize GitHub miner with authentication and configuration.

        Args:
            github_token (Optional[str]): GitHub API token for authentication.
            rate_limiter (Optional[RateLimiter]): Shared limiter for GitHub calls.
            timeout (Optional[float]): Timeout in seconds for each API call.
            max_candidates (Optional[int]): Repositories listed per owner.
            commit_window_days (Optional[int]): Window for recent commit counts.
        """
        if github_token is None and settings.github_token is not None:
            github_token = settings.github_token.get_secret_value()

        self.timeout = timeout or settings.request_timeout_seconds
        self.retry_policy = transient_retry(self.timeout)
        self.max_candidates = max_candidates or settings.max_candidate_repositories
        self.commit_window_days = commit_window_days or settings.commit_window_days
        self.rate_limiter = rate_limiter or RateLimiter(
            settings.github_max_requests, settings.github_rate_period
        )
        self.github = Github(
            auth=Auth.Token(github_token) if github_token else None,
            timeout=int(self.timeout),
            per_page=100,
        )

    def _check_rate_limit(self, check_name: str) -> None:
        """
        Log the GitHub API rate limit status.

        Args:
            check_name (str): Identifier for the rate limit check point.
        """
        remaining, limit = self.github.rate_limiting
        logger.info(
            {
                "message": f"{check_name} API rate limit status",
                "remaining_points": remaining,
                "total_points": limit,
            }
        )

        if 0 < remaining < limit * 0.1:
            logger.warning(
                {
                    "message": "GitHub API rate limit running low",
                    "remaining_points": remaining,
                }
            )

        if remaining == 0:
            reset_time = datetime.fromtimestamp(
                self.github.rate_limiting_resettime, tz=timezone.utc
            )
            logger.critical(
                {
                    "message": "GitHub API rate limit exhausted",
                    "reset_time": reset_time.isoformat(),
                }
            )

    async def _call(self, call: Callable[..., Any], *args: Any, name: str) -> Any:
        await self.rate_limiter.acquire()
        # Retries share the call deadline
        return await safe_api_call(
            self.retry_policy(call), *args, timeout=self.timeout, name=name
        )

    def _get_candidate_data(self, repo: Repository) -> RepositoryCandidate:
        """Convert a GitHub Repository object to a resolution candidate.

        Args:
            repo (Repository): The GitHub Repository object.

        Returns:
            RepositoryCandidate: A Pydantic model with the fields resolution uses.
        """
        return RepositoryCandidate(
            name=repo.name,
            owner=repo.owner.login,
            description=repo.description,
            is_fork=bool(repo.fork),
            star_count=repo.stargazers_count or 0,
            last_pushed_at=repo.pushed_at,
        )

    def _list_repositories(
        self, owner: str, owner_type: OwnerType
    ) -> List[RepositoryCandidate]:
        if owner_type is OwnerType.ORGANIZATION:
            account = self.github.get_organization(owner)
        else:
            account = self.github.get_user(owner)
        repos = account.get_repos()[: self.max_candidates]
        return [self._get_candidate_data(repo) for repo in repos]

    def _fetch_repository(self, repo_name: str) -> Repository:
        return self.github.get_repo(repo_name)

    def _count_recent_commits(self, repository: Repository) -> int:
        since = datetime.now(timezone.utc) - timedelta(days=self.commit_window_days)
        try:
            return repository.get_commits(since=since).totalCount
        except GithubException as e:
            # 409 Conflict: the repository is empty
            if e.status == 409:
                return 0
            raise

    def _count_issues(self, repository: Repository) -> Tuple[int, int]:
        """Count open and closed issues among the most recent ones, skipping PRs."""
        issues = [
            issue
            for issue in repository.get_issues(state="all")[:ISSUE_SAMPLE_SIZE]
            if issue.pull_request is None
        ]
        open_issues = len([issue for issue in issues if issue.state == "open"])
        closed_issues = len([issue for issue in issues if issue.state == "closed"])
        return open_issues, closed_issues

    def _count_contributors(self, repository: Repository) -> int:
        return repository.get_contributors().totalCount

    async def fetch_owner_repositories(
        self, owner: str, owner_type: OwnerType
    ) -> Optional[List[RepositoryCandidate]]:
        """
        List up to ``max_candidates`` repositories of an organization or user.

        Args:
            owner (str): Account login.
            owner_type (OwnerType): Organization or user listing.

        Returns:
            Optional[List[RepositoryCandidate]]: Candidates, or None if the
                listing could not be fetched.
        """
        logger.info(
            {
                "message": "Listing owner repositories",
                "owner": owner,
                "owner_type": owner_type.value,
            }
        )
        candidates = await self._call(
            self._list_repositories,
            owner,
            owner_type,
            name=f"{owner_type.value} repositories for {owner}",
        )
        if candidates is not None:
            logger.info(
                {
                    "message": "Listed owner repositories",
                    "owner": owner,
                    "owner_type": owner_type.value,
                    "count": len(candidates),
                }
            )
        return candidates

    async def mine_repository(
        self, owner: str, repo: str
    ) -> Optional[RepositoryActivityMetrics]:
        """
        Collect activity metrics for a GitHub repository.

        Args:
            owner (str): Repository owner login.
            repo (str): Repository name.

        Returns:
            Optional[RepositoryActivityMetrics]: Metrics, or None when any part
                of them could not be fetched.
        """
        repo_name = f"{owner}/{repo}"
        logger.info({"message": "Starting repository mining", "repository": repo_name})

        repository = await self._call(
            self._fetch_repository, repo_name, name=f"repository {repo_name}"
        )
        if repository is None:
            logger.warning(
                {"message": "Repository unavailable", "repository": repo_name}
            )
            return None

        commits = await self._call(
            self._count_recent_commits, repository, name=f"commits {repo_name}"
        )
        issues = await self._call(
            self._count_issues, repository, name=f"issues {repo_name}"
        )
        contributors = await self._call(
            self._count_contributors, repository, name=f"contributors {repo_name}"
        )

        if commits is None or issues is None or contributors is None:
            logger.warning(
                {
                    "message": "Incomplete repository metrics, leaving score unknown",
                    "repository": repo_name,
                    "commits_available": commits is not None,
                    "issues_available": issues is not None,
                    "contributors_available": contributors is not None,
                }
            )
            return None

        self._check_rate_limit("Repository mining")

        open_issues, closed_issues = issues
        metrics = RepositoryActivityMetrics(
            repository_name=repo_name,
            star_count=repository.stargazers_count or 0,
            fork_count=repository.forks_count or 0,
            commits_last_30_days=commits,
            contributors_count=contributors,
            open_issues_count=open_issues,
            closed_issues_count=closed_issues,
            last_pushed_at=repository.pushed_at,
            is_archived=bool(repository.archived),
            is_fork=bool(repository.fork),
            language=repository.language,
            created_at=repository.created_at,
        )

        logger.info(
            {
                "message": "Repository mining completed",
                "repository": repo_name,
                "stars": metrics.star_count,
                "forks": metrics.fork_count,
                "commits_30d": metrics.commits_last_30_days,
                "contributors": metrics.contributors_count,
                "open_issues": metrics.open_issues_count,
                "closed_issues": metrics.closed_issues_count,
                "last_push": str(metrics.last_pushed_at),
            }
        )
        return metrics
