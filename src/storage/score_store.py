"""
Development Score Storage Module.

This module handles the persistent storage and retrieval of development score
results. Each repository gets one JSON file holding its score history, so a
batch run can reuse a score computed earlier the same day instead of calling
the GitHub API again.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from config import logger
from analyzers.models import DevelopmentScoreResult


class ScoreStore:
    """
    Manages persistent storage of development score results.
    Keeps every stored result so score history can be inspected.
    """

    def __init__(self, data_dir: str):
        """Initialize the score storage.

        Args:
            data_dir (str): Base directory path for storing score files.
        """
        self.storage_dir = Path(data_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _get_score_file_path(self, repo_name: str, file_type: str = "json") -> str:
        """Generate the file path for a repository's score history.

        Args:
            repo_name (str): Full repository name (owner/repo).
            file_type (str): File extension for the storage format. Defaults to "json".

        Returns:
            str: Complete file path for the score history.
        """
        # Convert repo name to safe filename
        safe_name = repo_name.replace("/", "_").replace("\\", "_")
        return os.path.join(self.storage_dir, f"{safe_name}_development.{file_type}")

    def _read_history(self, file_path: str, repo_name: str) -> List[dict]:
        """Read stored entries, dropping anything that no longer parses."""
        if not os.path.exists(file_path):
            return []
        try:
            with open(file_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            # Handle corrupted file by starting fresh
            logger.error(
                {
                    "message": "Corrupted score history file",
                    "repository": repo_name,
                    "file": file_path,
                }
            )
            return []

        if not isinstance(data, list):
            data = [data]

        entries = []
        for item in data:
            try:
                DevelopmentScoreResult.model_validate(item)
            except ValidationError:
                logger.warning(
                    {
                        "message": "Dropping invalid score history entry",
                        "repository": repo_name,
                        "file": file_path,
                    }
                )
                continue
            entries.append(item)
        return entries

    def store_score(self, result: DevelopmentScoreResult) -> None:
        """Append a score result to the repository's history.

        The file is written to a temporary sibling and moved into place, so an
        interrupted write never leaves a truncated history behind.

        Args:
            result (DevelopmentScoreResult): Score to store.

        Raises:
            Exception: If storage operation fails.
        """
        file_path = self._get_score_file_path(result.repository_name)
        temp_path = f"{file_path}.tmp"

        try:
            existing_data = self._read_history(file_path, result.repository_name)
            existing_data.append(result.model_dump(mode="json"))

            with open(temp_path, "w") as f:
                json.dump(existing_data, f, indent=2, default=str)
            os.replace(temp_path, file_path)

            logger.info(
                {
                    "message": "Stored development score",
                    "repository": result.repository_name,
                    "score": result.score,
                    "file_path": file_path,
                }
            )

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to store development score",
                    "repository": result.repository_name,
                    "error": str(e),
                }
            )
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def load_scores(
        self, repo_name: str, limit: Optional[int] = None
    ) -> Optional[List[DevelopmentScoreResult]]:
        """Retrieve the score history of a repository.

        Args:
            repo_name (str): Full repository name (owner/repo).
            limit (Optional[int]): Maximum number of records to return.

        Returns:
            Optional[List[DevelopmentScoreResult]]: Results sorted by date
                descending, or None if nothing was stored.

        Raises:
            Exception: If retrieval operation fails.
        """
        file_path = self._get_score_file_path(repo_name)
        if not os.path.exists(file_path):
            return None

        try:
            with open(file_path, "r") as f:
                data = json.load(f)

            if isinstance(data, dict):
                data = [data]

            results = [DevelopmentScoreResult.model_validate(item) for item in data]

            results.sort(key=lambda x: x.scored_at, reverse=True)
            if limit:
                results = results[:limit]

            return results

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to retrieve score history",
                    "repository": repo_name,
                    "error": str(e),
                }
            )
            raise
