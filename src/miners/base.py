"""
Abstract Base Class for Repository Miners.

Defines the interface for repository data mining implementations.
All repository miners (GitHub, GitLab, etc.) should implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from miners.models import OwnerType, RepositoryActivityMetrics, RepositoryCandidate


class RepositoryMiner(ABC):
    """
    Abstract base class for repository miners.

    Defines the contract for mining repository data from different sources.
    Implementations should handle:
    - Authentication with the repository service
    - Listing an owner's repositories
    - Collecting activity metrics for one repository
    - Mapping unavailable data to None rather than to zero counts
    """

    @abstractmethod
    async def fetch_owner_repositories(
        self, owner: str, owner_type: OwnerType
    ) -> Optional[List[RepositoryCandidate]]:
        """
        List the repositories owned by an account.

        Args:
            owner (str): Organization or user login
            owner_type (OwnerType): Which listing to query

        Returns:
            Optional[List[RepositoryCandidate]]: Candidates, or None when the
                listing is unavailable
        """
        pass

    @abstractmethod
    async def mine_repository(
        self, owner: str, repo: str
    ) -> Optional[RepositoryActivityMetrics]:
        """
        Collect activity metrics for a repository.

        Args:
            owner (str): Repository owner login
            repo (str): Repository name

        Returns:
            Optional[RepositoryActivityMetrics]: Collected metrics, or None
                when they could not be obtained
        """
        pass
