"""
Overall token health score.

Averages whichever pillar scores are known. An unknown pillar is left out of
the mean instead of counting as zero.
"""

from typing import Mapping, Optional, Union

from analyzers.models import HealthPillar


def calculate_overall_score(
    pillars: Mapping[Union[HealthPillar, str], Optional[int]]
) -> Optional[int]:
    """
    Mean of the known pillar scores.

    Args:
        pillars (Mapping): Pillar to score, None for unknown pillars

    Returns:
        Optional[int]: Rounded mean in [0, 100], or None if no pillar is known
    """
    known = [score for score in pillars.values() if score is not None]
    if not known:
        return None
    return int(round(sum(known) / len(known)))
