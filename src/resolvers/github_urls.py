"""
GitHub URL parsing.

Tells apart links to a specific repository (``github.com/{owner}/{repo}``)
from links to an organization or user (``github.com/{owner}``).
"""

import re
from typing import NamedTuple, Optional

# Bare or www host only; gist.github.com and lookalike domains are rejected
HOST = r"(?:^|//|www\.)github\.com/"

# github.com/orgs/{owner} is the organization profile, not a repository
ORGS_PATTERN = re.compile(HOST + r"orgs/([^/?#\s]+)/?(?:[?#].*)?$", re.IGNORECASE)
REPOSITORY_PATTERN = re.compile(HOST + r"([^/?#\s]+)/([^/?#\s]+)", re.IGNORECASE)
OWNER_PATTERN = re.compile(HOST + r"([^/?#\s]+)/?(?:[?#].*)?$", re.IGNORECASE)


class ParsedGitHubUrl(NamedTuple):
    owner: str
    repo: Optional[str]

    @property
    def is_repository(self) -> bool:
        return self.repo is not None


def parse_github_url(url: Optional[str]) -> Optional[ParsedGitHubUrl]:
    """
    Parse a GitHub URL into its owner and, for repository links, its name.

    Args:
        url (Optional[str]): URL as found in token metadata

    Returns:
        Optional[ParsedGitHubUrl]: Parsed URL, or None when the string is not
            a GitHub organization or repository link
    """
    if not url or not isinstance(url, str):
        return None
    url = url.strip()

    match = ORGS_PATTERN.search(url)
    if match:
        return ParsedGitHubUrl(owner=match.group(1), repo=None)

    match = REPOSITORY_PATTERN.search(url)
    if match:
        owner, repo = match.groups()
        repo = re.sub(r"\.git$", "", repo, flags=re.IGNORECASE)
        if repo:
            return ParsedGitHubUrl(owner=owner, repo=repo)
        return None

    match = OWNER_PATTERN.search(url)
    if match:
        return ParsedGitHubUrl(owner=match.group(1), repo=None)

    return None
