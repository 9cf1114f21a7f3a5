"""Sentiment normalization to a bounded positivity index"""
from typing import Union

from src.core import InvalidInputError, SentimentLabel, SentimentResult

NEUTRAL_BASELINE = 0.5

def normalize(label: Union[SentimentLabel, str], confidence: float) -> float:
    """
    Map a (label, confidence) pair to a positivity index in [0, 1]

    POSITIVE keeps the confidence, NEGATIVE inverts it, and every other label
    (NEUTRAL, UNKNOWN, unrecognized) maps to the fixed 0.5 baseline.

    Args:
        label: Sentiment label (enum member or raw string)
        confidence: Classifier confidence in [0, 1]

    Returns:
        Positivity index, 0 = worst and 1 = best

    Raises:
        InvalidInputError: If confidence is not a number or lies outside [0, 1]
    """
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise InvalidInputError(
            message=f"Confidence must be a number, got {confidence!r}"
        )
    if not 0.0 <= confidence <= 1.0:
        raise InvalidInputError(
            message=f"Confidence must be within [0, 1], got {confidence}"
        )

    label = SentimentLabel.coerce(label)
    if label is SentimentLabel.POSITIVE:
        return float(confidence)
    if label is SentimentLabel.NEGATIVE:
        return 1.0 - float(confidence)
    return NEUTRAL_BASELINE

def positivity_index(result: SentimentResult) -> float:
    """Positivity index of a classifier result"""
    return normalize(result.label, result.confidence)
