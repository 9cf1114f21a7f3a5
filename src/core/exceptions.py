"""Custom exceptions for the review action engine"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all application errors

    Attributes:
        message: Human-readable error message
        code: Short error code for identification
    """

    code: str = "GENERAL_ERROR"
    message: str = "An application error occurred"

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any
    ):
        self.code = code or self.code
        self.message = message or self.message
        self.extra = kwargs
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for response"""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                **self.extra,
            }
        }

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

class InvalidInputError(AppError):
    """Raised when input data is invalid (empty text, out-of-range confidence, etc.)"""
    code = "INVALID_INPUT"
    message = "The provided input is invalid or malformed"

class EmptyReviewSourceError(InvalidInputError):
    """Raised when the review source yields no reviews"""
    code = "EMPTY_REVIEW_SOURCE"
    message = "No reviews are available to analyze"

class RuleSyntaxError(InvalidInputError):
    """Raised for a rule line that does not match the rule grammar"""
    code = "RULE_SYNTAX"
    message = "The rule line could not be parsed"

class ClassificationError(AppError):
    """Raised when the sentiment classifier fails or returns an unexpected shape"""
    code = "CLASSIFICATION_FAILED"
    message = "Sentiment classification failed. Please try again later"

class ModelNotLoadedError(ClassificationError):
    """Raised when the local sentiment model fails to load"""
    code = "MODEL_NOT_LOADED"
    message = "The sentiment model is not available or failed to initialize"

class RuleEvaluationError(AppError):
    """Raised when a rule condition cannot be compiled or evaluated"""
    code = "RULE_EVALUATION_FAILED"
    message = "The rule condition could not be evaluated"

class LoggingError(AppError):
    """Raised when an analysis event cannot be delivered to the logging sink"""
    code = "LOGGING_FAILED"
    message = "The analysis event could not be logged"
