"""Value Objects - Immutable objects defined by their attributes"""

from .match_score import MatchScore, compute_match_score, REQUIRED_WEIGHT, PREFERRED_WEIGHT
__all__ = [
    "MatchScore",
    "compute_match_score",
    "REQUIRED_WEIGHT",
    "PREFERRED_WEIGHT",
]
