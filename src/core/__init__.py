"""
Core domain layer
"""
from .models import (
    ActionCode,
    ActionDecision,
    ActionDisplay,
    AnalysisOutcome,
    CustomerRecord,
    LogEvent,
    SentimentLabel,
    SentimentResult,
    SimulatedDecision,
    SimulationKPIs,
    SimulationResult,
)
from .exceptions import (
    AppError,
    InvalidInputError,
    EmptyReviewSourceError,
    RuleSyntaxError,
    ClassificationError,
    ModelNotLoadedError,
    RuleEvaluationError,
    LoggingError,
)

__all__ = [
    "ActionCode",
    "ActionDecision",
    "ActionDisplay",
    "AnalysisOutcome",
    "CustomerRecord",
    "LogEvent",
    "SentimentLabel",
    "SentimentResult",
    "SimulatedDecision",
    "SimulationKPIs",
    "SimulationResult",
    "AppError",
    "InvalidInputError",
    "EmptyReviewSourceError",
    "RuleSyntaxError",
    "ClassificationError",
    "ModelNotLoadedError",
    "RuleEvaluationError",
    "LoggingError",
]
