"""Multi-factor scoring."""

from .factors import (
    CompositeScore,
    FactorScores,
    PatternScore,
    calculate_composite_score,
    calculate_pattern_score,
    generate_factor_scores,
)

__all__ = [
    "generate_factor_scores",
    "calculate_composite_score",
    "calculate_pattern_score",
    "FactorScores",
    "CompositeScore",
    "PatternScore",
]
