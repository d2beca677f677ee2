"""
Multi-Token Development Analysis Module.

Coordinates the development pillar for a batch of token projects:

- Resolving each project's GitHub URL to its primary repository
- Reusing scores already computed today
- Mining repository metrics and scoring them
- Storing results for historical tracking

A failure for one token is logged and recorded as an unknown score; the batch
always continues.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from config import logger
from analyzers.development import DevelopmentActivityScorer
from analyzers.models import DevelopmentScoreResult
from miners.base import RepositoryMiner
from resolvers.models import ResolutionFailure
from resolvers.repository_resolver import RepositoryResolver
from storage.score_store import ScoreStore


class MultiTokenAnalyzer:
    """
    Computes development scores for multiple token projects.

    Attributes:
        store (ScoreStore): Score cache and history.
        resolver (RepositoryResolver): Maps URLs to primary repositories.
        miner (RepositoryMiner): Fetches repository activity metrics.
        scorer (DevelopmentActivityScorer): Scores repository metrics.
        token_urls (List[str]): GitHub URLs of the token projects.
    """

    def __init__(
        self,
        score_store: ScoreStore,
        resolver: RepositoryResolver,
        miner: RepositoryMiner,
        scorer: DevelopmentActivityScorer,
        token_urls: List[str],
    ):
        """Initialize the multi-token analyzer.

        Args:
            score_store (ScoreStore): Score cache and history.
            resolver (RepositoryResolver): Maps URLs to primary repositories.
            miner (RepositoryMiner): Fetches repository activity metrics.
            scorer (DevelopmentActivityScorer): Scores repository metrics.
            token_urls (List[str]): GitHub URLs of the token projects.
        """
        self.store = score_store
        self.resolver = resolver
        self.miner = miner
        self.scorer = scorer
        self.token_urls = token_urls

    def _cached_today(self, repo_name: str) -> Optional[DevelopmentScoreResult]:
        try:
            history = self.store.load_scores(repo_name, limit=1)
        except Exception as e:
            # store_score rewrites an unreadable history on the next save
            logger.warning(
                {
                    "message": "Ignoring unreadable score history",
                    "repository": repo_name,
                    "error": str(e),
                }
            )
            return None
        if history and history[0].scored_at.date() == datetime.now(timezone.utc).date():
            return history[0]
        return None

    async def analyze_token(self, url: str) -> Optional[DevelopmentScoreResult]:
        """
        Compute the development score for one token project.

        Args:
            url (str): GitHub URL of the project.

        Returns:
            Optional[DevelopmentScoreResult]: The score, or None when it is
                unknown (unresolvable URL or unavailable metrics).
        """
        resolution = await self.resolver.resolve(url)
        if isinstance(resolution, ResolutionFailure):
            logger.warning(
                {
                    "message": "Skipping development scoring",
                    "url": url,
                    "reason": resolution.value,
                }
            )
            return None

        repo_name = resolution.full_name
        logger.info({"message": "Analyzing repository", "repository": repo_name})

        cached = self._cached_today(repo_name)
        if cached is not None:
            logger.info(
                {
                    "message": "Development score already exists for today, skipping mining",
                    "repository": repo_name,
                }
            )
            return cached

        metrics = await self.miner.mine_repository(resolution.owner, resolution.repo)
        if metrics is None:
            logger.warning(
                {
                    "message": "No repository metrics available, score unknown",
                    "repository": repo_name,
                }
            )
            return None

        result = self.scorer.score(metrics)
        self.store.store_score(result)
        return result

    async def analyze_tokens(self) -> Dict[str, Optional[DevelopmentScoreResult]]:
        """
        Score every configured token project.

        Returns:
            Dict[str, Optional[DevelopmentScoreResult]]: URL to score, None
                where the score is unknown.
        """
        results = {}
        for url in self.token_urls:
            try:
                results[url] = await self.analyze_token(url)
            except Exception as e:
                logger.error(
                    {
                        "message": "Failed to analyze token",
                        "url": url,
                        "error": str(e),
                    }
                )
                results[url] = None

        scored = len([r for r in results.values() if r is not None])
        logger.info(
            {
                "message": "Development analysis finished",
                "tokens": len(results),
                "scored": scored,
                "unknown": len(results) - scored,
            }
        )
        return results
