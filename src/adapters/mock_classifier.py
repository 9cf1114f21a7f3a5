"""Canned sentiment classifier for running without a model or API token"""
import random
from typing import Mapping, Optional, Sequence

from src.core import InvalidInputError, SentimentLabel, SentimentResult

MOCK_SENTIMENTS = (
    SentimentResult(label=SentimentLabel.POSITIVE, confidence=0.95),
    SentimentResult(label=SentimentLabel.NEGATIVE, confidence=0.92),
    SentimentResult(label=SentimentLabel.NEUTRAL, confidence=0.65),
    SentimentResult(label=SentimentLabel.POSITIVE, confidence=0.88),
    SentimentResult(label=SentimentLabel.NEGATIVE, confidence=0.76),
)

class MockClassifier:
    """
    Returns canned results: a fixed answer for known texts, otherwise a
    seeded random pick from MOCK_SENTIMENTS
    """

    model_identifier = "mock-sentiment"

    def __init__(
        self,
        responses: Optional[Mapping[str, SentimentResult]] = None,
        samples: Sequence[SentimentResult] = MOCK_SENTIMENTS,
        seed: Optional[int] = None,
    ) -> None:
        if not samples:
            raise InvalidInputError(message="Mock classifier needs at least one sample result")
        self.responses = dict(responses or {})
        self.samples = list(samples)
        self.rng = random.Random(seed)

    def classify(self, text: str) -> SentimentResult:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError(
                message="Text input is required and must be non-empty"
            )
        if text in self.responses:
            return self.responses[text]
        return self.rng.choice(self.samples)
