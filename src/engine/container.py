"""Container for the analysis engine with dependency injection"""
import random
from functools import lru_cache

from config import logger, settings
from src.adapters import (
    MockClassifier,
    NullLogSink,
    RemoteInferenceClassifier,
    TsvReviewSource,
    WebhookLogSink,
)
from src.core.ports.analysis import ILogSink, ISentimentClassifier
from src.engine.actions import ActionPolicy, build_policy
from src.engine.dispatcher import EventDispatcher
from src.engine.display import load_action_display
from src.engine.service import ReviewAnalysisEngine

def resolve_backend() -> str:
    """Configured classifier backend, resolving 'auto' by the presence of an API token"""
    if settings.classifier_backend != "auto":
        return settings.classifier_backend
    return "remote" if settings.hf_api_token else "mock"

@lru_cache(maxsize=1)
def get_classifier() -> ISentimentClassifier:
    """
    Get singleton sentiment classifier

    Returns:
        Remote, local or mock classifier depending on settings.classifier_backend
        Subsequent calls return the same cached instance
    """
    backend = resolve_backend()
    logger.info(f"Using {backend} sentiment classifier")
    if backend == "remote":
        return RemoteInferenceClassifier(
            api_token=settings.hf_api_token,
            model_name=settings.remote_model_name,
            api_url=settings.inference_api_url,
            timeout=settings.request_timeout,
        )
    if backend == "local":
        # torch and transformers are only imported when the local model is used
        from src.adapters.local_classifier import LocalPipelineClassifier
        return LocalPipelineClassifier(model_name=settings.local_model_name)
    return MockClassifier(seed=settings.random_seed)

@lru_cache(maxsize=1)
def get_review_source() -> TsvReviewSource:
    return TsvReviewSource(settings.reviews_path)

@lru_cache(maxsize=1)
def get_policy() -> ActionPolicy:
    """
    Get singleton action policy configured by settings.action_policy
    """
    return build_policy(
        settings.action_policy,
        low_threshold=settings.low_threshold,
        high_threshold=settings.high_threshold,
        confidence_threshold=settings.confidence_threshold,
        display=load_action_display(settings.action_display_path),
    )

@lru_cache(maxsize=1)
def get_log_sink() -> ILogSink:
    if settings.webhook_url:
        return WebhookLogSink(settings.webhook_url, timeout=settings.webhook_timeout)
    logger.warning("Webhook logging skipped: WEBHOOK_URL not configured")
    return NullLogSink()

@lru_cache(maxsize=1)
def get_dispatcher() -> EventDispatcher:
    return EventDispatcher(get_log_sink(), max_retries=settings.webhook_max_retries)

@lru_cache(maxsize=1)
def get_engine() -> ReviewAnalysisEngine:
    """
    Get singleton ReviewAnalysisEngine with all dependencies wired

    Returns:
        ReviewAnalysisEngine instance with classifier, review source, policy and dispatcher injected
        Subsequent calls return the same cached instance
    """
    return ReviewAnalysisEngine(
        classifier=get_classifier(),
        review_source=get_review_source(),
        policy=get_policy(),
        dispatcher=get_dispatcher(),
        rng=random.Random(settings.random_seed),
        mock_mode=resolve_backend() == "mock",
    )
