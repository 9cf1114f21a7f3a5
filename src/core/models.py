"""Core data models for the review action engine"""
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SegmentType = Literal["VIP", "STANDARD", "OTHER"]

class SentimentLabel(str, Enum):
    """Sentiment labels produced by the classifiers"""
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def coerce(cls, value: object) -> "SentimentLabel":
        """Upper-case a raw classifier label, mapping anything unrecognized to UNKNOWN"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return cls.UNKNOWN
        return cls.UNKNOWN

class ActionCode(str, Enum):
    """Closed set of business actions"""
    OFFER_COUPON = "OFFER_COUPON"
    FLAG_FOR_REVIEW = "FLAG_FOR_REVIEW"
    THANK_CUSTOMER = "THANK_CUSTOMER"
    NO_ACTION = "NO_ACTION"
    EMERGENCY_CALL = "EMERGENCY_CALL"
    SUGGEST_UPGRADE = "SUGGEST_UPGRADE"
    THANK_AND_CROSSSELL = "THANK_AND_CROSSSELL"
    HUMAN_REVIEW = "HUMAN_REVIEW"
    REQUEST_FEEDBACK = "REQUEST_FEEDBACK"
    ASK_REFERRAL = "ASK_REFERRAL"
    THANK_ONLY = "THANK_ONLY"

class SentimentResult(BaseModel):
    """Label and confidence returned by a sentiment classifier"""
    model_config = ConfigDict(frozen=True)

    label: SentimentLabel = Field(
        ...,
        description="POSITIVE, NEGATIVE, NEUTRAL or UNKNOWN"
    )
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Classifier confidence for the label"
    )

    @field_validator("label", mode="before")
    @classmethod
    def _coerce_label(cls, value: object) -> SentimentLabel:
        return SentimentLabel.coerce(value)

class ActionDisplay(BaseModel):
    """User-facing metadata for one action code"""
    model_config = ConfigDict(frozen=True)

    message: str
    icon: str
    color: str
    tone: str
    recommendation: str

class ActionDecision(BaseModel):
    """Business action selected for one analysis event"""
    model_config = ConfigDict(frozen=True)

    action_code: ActionCode = Field(
        ...,
        description="Selected action"
    )
    message: str = Field(
        ...,
        description="Message shown to the customer"
    )
    icon: str
    color: str
    tone: str
    trigger: str = Field(
        ...,
        description="Why this action was selected"
    )
    recommendation: str = Field(
        ...,
        description="Suggested follow-up for the team"
    )
    source_score: float = Field(
        ...,
        description="Score the decision was based on (positivity index or confidence)"
    )

class CustomerRecord(BaseModel):
    """Customer profile evaluated by rule lists and the batch simulator"""
    model_config = ConfigDict(frozen=True)

    id: str
    segment: SegmentType
    monthly_charges: float = Field(..., ge=0.0)
    tenure_months: int = Field(..., ge=0)
    contract_type: str
    churn_score: float = Field(..., ge=0.0, le=1.0)
    sentiment: SentimentLabel
    confidence: float = Field(..., ge=0.0, le=1.0)

class AnalysisOutcome(BaseModel):
    """Result of analyzing one review"""
    review_text: str
    sentiment: SentimentResult
    positivity_index: float = Field(..., ge=0.0, le=1.0)
    decision: ActionDecision
    model_identifier: str
    processing_time_ms: int = Field(..., ge=0)

class LogEvent(BaseModel):
    """Event delivered to the logging sink after an analysis"""
    model_config = ConfigDict(frozen=True)

    review_text: str
    sentiment: SentimentLabel
    confidence: float
    action_code: ActionCode
    timestamp: str = Field(
        ...,
        description="UTC ISO-8601 timestamp"
    )
    session_id: str
    model_identifier: str
    processing_time_ms: int = 0
    mock_mode: bool = False

class SimulatedDecision(BaseModel):
    """Action chosen for one synthetic record"""
    record: CustomerRecord
    action_code: ActionCode
    cost: float
    high_risk: bool

class SimulationKPIs(BaseModel):
    """Aggregated cost, coverage and score of a simulated batch"""
    record_count: int
    total_cost: float
    high_risk_count: int
    covered_high_risk: int
    coverage: float = Field(..., ge=0.0, le=1.0)
    safety_score: float
    efficiency_score: float
    policy_score: int = Field(..., ge=0)
    action_counts: Dict[str, int]

class SimulationResult(BaseModel):
    """Per-record results and KPIs of a batch simulation"""
    seed: Optional[int] = None
    results: List[SimulatedDecision]
    kpis: SimulationKPIs
