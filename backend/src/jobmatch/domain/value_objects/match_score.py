"""
MatchScore Value Object
Weighted skill-overlap score between a candidate and a job (0-100)
"""
from dataclasses import dataclass
from fractions import Fraction
from math import floor
from typing import AbstractSet, Hashable

REQUIRED_WEIGHT = 70
PREFERRED_WEIGHT = 30


def _weighted_overlap(expected: AbstractSet[Hashable], candidate: AbstractSet[Hashable], weight: int) -> Fraction:
    # An empty expectation is fully satisfied
    if not expected:
        return Fraction(weight)
    matched = len(expected & candidate)
    return Fraction(weight * matched, len(expected))


@dataclass(frozen=True)
class MatchScore:
    """Match score value object - immutable"""

    value: int

    def __post_init__(self):
        """Validate match score range"""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("Match score must be an integer")

        if not 0 <= self.value <= 100:
            raise ValueError("Match score must be between 0 and 100")

    @classmethod
    def calculate(
        cls,
        required: AbstractSet[Hashable],
        preferred: AbstractSet[Hashable],
        candidate: AbstractSet[Hashable],
    ) -> "MatchScore":
        """
        Score a candidate's skills against a job's skill sets

        Required skills carry 70 points and preferred skills 30, each scaled by
        the fraction matched. The sum is rounded half-up and clamped to 0-100.

        Args:
            required: Skill ids the job requires
            preferred: Skill ids the job prefers
            candidate: Skill ids the candidate holds

        Returns:
            MatchScore
        """
        required, preferred, candidate = frozenset(required), frozenset(preferred), frozenset(candidate)
        total = (
            _weighted_overlap(required, candidate, REQUIRED_WEIGHT)
            + _weighted_overlap(preferred, candidate, PREFERRED_WEIGHT)
        )
        rounded = floor(total + Fraction(1, 2))
        return cls(value=max(0, min(100, rounded)))

    def is_good_match(self, threshold: int = 70) -> bool:
        """Check if score meets threshold for good match"""
        return self.value >= threshold

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value}%"

    def __repr__(self) -> str:
        return f"MatchScore({self.value})"


def compute_match_score(
    required: AbstractSet[Hashable],
    preferred: AbstractSet[Hashable],
    candidate: AbstractSet[Hashable],
) -> int:
    """Pure 0-100 compatibility score, see MatchScore.calculate"""
    return MatchScore.calculate(required, preferred, candidate).value
