"""
Repository Mining Data Models.

Defines the data models exchanged between the GitHub miner, the repository
resolver and the development scorer. Uses Pydantic for validation so raw API
responses are checked once, at the fetch boundary.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class OwnerType(Enum):
    """Kinds of repository listings, tried in declaration order."""

    ORGANIZATION = "organization"
    USER = "user"


class RepositoryCandidate(BaseModel):
    """Summary of one repository considered during resolution."""

    name: str
    owner: str
    description: Optional[str] = None
    is_fork: bool = False
    star_count: int = Field(default=0, ge=0)
    last_pushed_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepositoryActivityMetrics(BaseModel):
    """Raw activity facts about a resolved repository.

    ``last_pushed_at`` is None when the repository has never been pushed to.
    """

    repository_name: str
    star_count: int = Field(ge=0)
    fork_count: int = Field(ge=0)
    commits_last_30_days: int = Field(ge=0)
    contributors_count: int = Field(ge=0)
    open_issues_count: int = Field(ge=0)
    closed_issues_count: int = Field(ge=0)
    last_pushed_at: Optional[datetime] = None
    is_archived: bool = False
    is_fork: bool = False
    language: Optional[str] = None
    created_at: Optional[datetime] = None
    collection_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def total_issues(self) -> int:
        return self.open_issues_count + self.closed_issues_count
