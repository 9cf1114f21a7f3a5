"""Action selection policies mapping sentiment to a business action"""
from __future__ import annotations

from typing import Dict, Mapping, Optional, Protocol

from src.core import (
    ActionCode,
    ActionDecision,
    ActionDisplay,
    InvalidInputError,
    SentimentLabel,
    SentimentResult,
)
from src.engine.display import DEFAULT_ACTION_DISPLAY, NO_ACTION_LABEL_DISPLAY
from src.engine.normalizer import normalize

class ActionPolicy(Protocol):
    """Interface shared by the action policies"""

    name: str

    def select(self, result: SentimentResult) -> ActionDecision:
        ...

def _decision(
    display: Mapping[ActionCode, ActionDisplay],
    action: ActionCode,
    trigger: str,
    score: float,
    bundle: Optional[ActionDisplay] = None,
) -> ActionDecision:
    bundle = bundle or display[action]
    return ActionDecision(
        action_code=action,
        message=bundle.message,
        icon=bundle.icon,
        color=bundle.color,
        tone=bundle.tone,
        trigger=trigger,
        recommendation=bundle.recommendation,
        source_score=score,
    )

class ThresholdPolicy:
    """
    Three-bucket policy over the positivity index

    index <= low          -> OFFER_COUPON
    low < index < high    -> REQUEST_FEEDBACK
    index >= high         -> ASK_REFERRAL
    """

    name = "three_bucket"

    def __init__(
        self,
        low: float = 0.4,
        high: float = 0.7,
        display: Optional[Mapping[ActionCode, ActionDisplay]] = None,
    ) -> None:
        if not 0.0 <= low < high <= 1.0:
            raise InvalidInputError(
                message=f"Thresholds must satisfy 0 <= low < high <= 1 (got low={low}, high={high})"
            )
        self.low = low
        self.high = high
        self.display: Dict[ActionCode, ActionDisplay] = dict(display or DEFAULT_ACTION_DISPLAY)

    def select_index(self, index: float) -> ActionDecision:
        """Select the action for an already normalized positivity index"""
        if index <= self.low:
            return _decision(self.display, ActionCode.OFFER_COUPON, "Critical sentiment, churn risk", index)
        if index < self.high:
            return _decision(self.display, ActionCode.REQUEST_FEEDBACK, "Ambiguous sentiment", index)
        return _decision(self.display, ActionCode.ASK_REFERRAL, "Happy customer", index)

    def select(self, result: SentimentResult) -> ActionDecision:
        return self.select_index(normalize(result.label, result.confidence))

class LabelConfidencePolicy:
    """
    Five-bucket policy on the raw label and confidence

    NEGATIVE above the threshold gets a coupon, NEGATIVE at or below it is
    flagged for review; POSITIVE above the threshold is thanked, everything
    else gets NO_ACTION. NEUTRAL and unrecognized labels use their own
    NO_ACTION wording from label_display when it has an entry.
    """

    name = "label_confidence"

    def __init__(
        self,
        threshold: float = 0.7,
        display: Optional[Mapping[ActionCode, ActionDisplay]] = None,
        label_display: Optional[Mapping[SentimentLabel, ActionDisplay]] = None,
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise InvalidInputError(
                message=f"Confidence threshold must be within [0, 1], got {threshold}"
            )
        self.threshold = threshold
        self.display: Dict[ActionCode, ActionDisplay] = dict(display or DEFAULT_ACTION_DISPLAY)
        self.label_display: Dict[SentimentLabel, ActionDisplay] = dict(
            NO_ACTION_LABEL_DISPLAY if label_display is None else label_display
        )

    def select(self, result: SentimentResult) -> ActionDecision:
        label, score = result.label, result.confidence

        if label is SentimentLabel.NEGATIVE:
            if score > self.threshold:
                return _decision(self.display, ActionCode.OFFER_COUPON, "High-confidence negative review", score)
            return _decision(self.display, ActionCode.FLAG_FOR_REVIEW, "Low-confidence negative review", score)
        if label is SentimentLabel.POSITIVE:
            if score > self.threshold:
                return _decision(self.display, ActionCode.THANK_CUSTOMER, "High-confidence positive review", score)
            return _decision(self.display, ActionCode.NO_ACTION, "Low-confidence positive review", score)
        if label is SentimentLabel.NEUTRAL:
            return _decision(
                self.display, ActionCode.NO_ACTION, "Neutral sentiment", score,
                bundle=self.label_display.get(SentimentLabel.NEUTRAL),
            )
        return _decision(
            self.display, ActionCode.NO_ACTION, "Unknown sentiment", score,
            bundle=self.label_display.get(SentimentLabel.UNKNOWN),
        )

def build_policy(
    name: str,
    *,
    low_threshold: float = 0.4,
    high_threshold: float = 0.7,
    confidence_threshold: float = 0.7,
    display: Optional[Mapping[ActionCode, ActionDisplay]] = None,
) -> ActionPolicy:
    """
    Build an action policy by its configured name

    Raises:
        InvalidInputError: If the policy name is unknown
    """
    if name == ThresholdPolicy.name:
        return ThresholdPolicy(low=low_threshold, high=high_threshold, display=display)
    if name == LabelConfidencePolicy.name:
        return LabelConfidencePolicy(threshold=confidence_threshold, display=display)
    raise InvalidInputError(
        message=f"Unknown action policy: {name}"
    )
