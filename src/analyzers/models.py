"""
Health Score Data Models.

Defines the development score result and the per-pillar score record the
overall token health score is computed from.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from miners.models import RepositoryActivityMetrics


class HealthPillar(Enum):
    """
    The five categories averaged into a token health score.

    Attributes:
        SECURITY: Contract and ownership risk
        LIQUIDITY: Trading volume and market depth
        TOKENOMICS: Supply and distribution
        COMMUNITY: Social reach and engagement
        DEVELOPMENT: Source repository activity
    """

    SECURITY = "security"
    LIQUIDITY = "liquidity"
    TOKENOMICS = "tokenomics"
    COMMUNITY = "community"
    DEVELOPMENT = "development"


class DevelopmentScoreResult(BaseModel):
    """Development pillar score for one repository."""

    repository_name: str
    score: int = Field(ge=0, le=100)
    metrics: RepositoryActivityMetrics
    scored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PillarScores(BaseModel):
    """Pillar scores of a token; None means the pillar is unknown."""

    security: Optional[int] = Field(default=None, ge=0, le=100)
    liquidity: Optional[int] = Field(default=None, ge=0, le=100)
    tokenomics: Optional[int] = Field(default=None, ge=0, le=100)
    community: Optional[int] = Field(default=None, ge=0, le=100)
    development: Optional[int] = Field(default=None, ge=0, le=100)

    def as_dict(self) -> Dict[HealthPillar, Optional[int]]:
        return {pillar: getattr(self, pillar.value) for pillar in HealthPillar}

    @property
    def overall(self) -> Optional[int]:
        # Imported here, health imports this module
        from analyzers.health import calculate_overall_score

        return calculate_overall_score(self.as_dict())
