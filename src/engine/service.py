"""Review analysis engine: classify a review, pick an action, emit a log event"""
from __future__ import annotations

import random
import string
import time
from datetime import datetime, timezone
from typing import List, Optional

from config import logger
from src.core import (
    AnalysisOutcome,
    AppError,
    ClassificationError,
    EmptyReviewSourceError,
    InvalidInputError,
    LogEvent,
    SentimentResult,
)
from src.core.ports.analysis import IReviewSource, ISentimentClassifier
from src.engine.actions import ActionPolicy
from src.engine.dispatcher import EventDispatcher
from src.engine.normalizer import normalize

_SESSION_CHARS = string.digits + string.ascii_lowercase

def generate_session_id(rng: Optional[random.Random] = None) -> str:
    """Session id of the form sess_<epoch-ms>_<9 base36 chars>"""
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_SESSION_CHARS) for _ in range(9))
    return f"sess_{int(time.time() * 1000)}_{suffix}"

class ReviewAnalysisEngine:
    """
    Engine context for analysis events

    Carries the collaborators and per-session state (session id, loaded
    reviews, random generator) that every analysis call needs.

    Attributes:
        classifier: Sentiment classifier collaborator
        review_source: Source of review texts
        policy: Action policy mapping sentiment to a decision
        dispatcher: Optional event dispatcher for the logging sink
        session_id: Identifier attached to every log event
    """

    def __init__(
        self,
        classifier: ISentimentClassifier,
        review_source: IReviewSource,
        policy: ActionPolicy,
        dispatcher: Optional[EventDispatcher] = None,
        session_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
        mock_mode: bool = False,
    ) -> None:
        self.classifier = classifier
        self.review_source = review_source
        self.policy = policy
        self.dispatcher = dispatcher
        self.rng = rng or random.Random()
        self.session_id = session_id or generate_session_id(self.rng)
        self.mock_mode = mock_mode
        self._reviews: List[str] = []

    @property
    def model_identifier(self) -> str:
        return getattr(self.classifier, "model_identifier", type(self.classifier).__name__)

    def reviews(self) -> List[str]:
        """Reviews from the source, loaded on first use"""
        if not self._reviews:
            self._reviews = list(self.review_source.load())
        if not self._reviews:
            raise EmptyReviewSourceError()
        return self._reviews

    def pick_review(self) -> str:
        """Pick one review uniformly at random"""
        return self.rng.choice(self.reviews())

    def analyze(self, text: str) -> AnalysisOutcome:
        """
        Classify a review and select the business action

        Args:
            text: Review text (non-empty)

        Returns:
            AnalysisOutcome with sentiment, positivity index and decision

        Raises:
            InvalidInputError: If text is empty
            ClassificationError: If the classifier fails; no default sentiment is substituted
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError(
                message="Review text is required and must be non-empty"
            )

        logger.info(f"Analyzing review: {text[:50]!r}")
        started = time.perf_counter()

        try:
            sentiment = self.classifier.classify(text)
        except AppError as e:
            if isinstance(e, (ClassificationError, InvalidInputError)):
                raise
            raise ClassificationError(message=e.message) from e
        except Exception as e:
            logger.exception("Unexpected classifier failure")
            raise ClassificationError(
                message="Sentiment classification failed unexpectedly"
            ) from e

        if not isinstance(sentiment, SentimentResult):
            logger.error(f"Classifier returned {type(sentiment).__name__} instead of SentimentResult")
            raise ClassificationError(
                message="Classifier returned an unexpected result"
            )

        index = normalize(sentiment.label, sentiment.confidence)
        decision = self.policy.select(sentiment)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        outcome = AnalysisOutcome(
            review_text=text,
            sentiment=sentiment,
            positivity_index=index,
            decision=decision,
            model_identifier=self.model_identifier,
            processing_time_ms=elapsed_ms,
        )
        self._emit(outcome)
        logger.info(
            f"Sentiment {sentiment.label.value} ({sentiment.confidence:.1%}) -> {decision.action_code.value}"
        )
        return outcome

    def analyze_random_review(self) -> AnalysisOutcome:
        """Pick a random review and analyze it"""
        return self.analyze(self.pick_review())

    def _emit(self, outcome: AnalysisOutcome) -> None:
        if self.dispatcher is None:
            return
        event = LogEvent(
            review_text=outcome.review_text,
            sentiment=outcome.sentiment.label,
            confidence=outcome.sentiment.confidence,
            action_code=outcome.decision.action_code,
            timestamp=datetime.now(timezone.utc).isoformat(),
            session_id=self.session_id,
            model_identifier=outcome.model_identifier,
            processing_time_ms=outcome.processing_time_ms,
            mock_mode=self.mock_mode,
        )
        self.dispatcher.emit(event)
