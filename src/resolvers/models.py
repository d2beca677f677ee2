"""
Repository Resolution Models.

Results of resolving a token project's GitHub URL to one repository.
"""

from enum import Enum

from pydantic import BaseModel


class ResolutionFailure(Enum):
    """
    Reasons a URL could not be resolved to a repository.

    Attributes:
        INVALID_URL: The string is not a GitHub organization or repository URL
        NOT_FOUND: The owner has no repositories that could be listed
    """

    INVALID_URL = "invalid_url"
    NOT_FOUND = "not_found"


class ResolvedRepository(BaseModel):
    """The repository chosen as a project's primary codebase."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
