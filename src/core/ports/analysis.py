"""Ports (interfaces) for the collaborators of the analysis engine"""
from typing import List, Protocol

from src.core import LogEvent, SentimentResult

class ISentimentClassifier(Protocol):
    """Interface for sentiment classifiers"""

    model_identifier: str

    def classify(self, text: str) -> SentimentResult:
        """
        Classify the sentiment of a single review

        Args:
            text (str): Review text

        Returns:
            SentimentResult: Label and confidence

        Raises:
            ClassificationError: If the classifier is unavailable or returns a malformed response
        """
        ...

class IReviewSource(Protocol):
    """Interface for review sources"""

    def load(self) -> List[str]:
        """Return the ordered list of review strings"""
        ...

class ILogSink(Protocol):
    """Interface for analysis event sinks"""

    def log(self, event: LogEvent) -> None:
        """
        Deliver one analysis event

        Raises:
            LoggingError: If delivery fails
        """
        ...
