"""
Adapters for the external collaborators (classifiers, review files, webhook)
"""
from .remote_classifier import RemoteInferenceClassifier, parse_inference_response
from .mock_classifier import MockClassifier, MOCK_SENTIMENTS
from .reviews import TsvReviewSource, StaticReviewSource, parse_reviews
from .webhook_sink import WebhookLogSink, NullLogSink

__all__ = [
    "RemoteInferenceClassifier",
    "parse_inference_response",
    "MockClassifier",
    "MOCK_SENTIMENTS",
    "TsvReviewSource",
    "StaticReviewSource",
    "parse_reviews",
    "WebhookLogSink",
    "NullLogSink",
]
