"""Sentiment classifier backed by the hosted Hugging Face inference API"""
from __future__ import annotations

from typing import Any, Optional

import requests
from pydantic import ValidationError

from config import logger
from src.core import ClassificationError, InvalidInputError, SentimentResult

def parse_inference_response(payload: Any) -> SentimentResult:
    """
    Convert an inference API response into a SentimentResult

    Accepts both the flat shape ``[{"label": ..., "score": ...}]`` and the
    nested shape ``[[{"label": ..., "score": ...}, ...]]``; the highest score wins.

    Raises:
        ClassificationError: If the response does not have either shape
    """
    candidates = payload
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], list):
        candidates = candidates[0]

    if not isinstance(candidates, list) or not candidates:
        raise ClassificationError(
            message=f"Unexpected API response format: {payload!r}"
        )

    valid = [
        item for item in candidates
        if isinstance(item, dict)
        and isinstance(item.get("label"), str)
        and isinstance(item.get("score"), (int, float))
        and not isinstance(item.get("score"), bool)
    ]
    if not valid:
        raise ClassificationError(
            message=f"Unexpected API response format: {payload!r}"
        )

    best = max(valid, key=lambda item: item["score"])
    try:
        return SentimentResult(label=best["label"], confidence=float(best["score"]))
    except ValidationError as e:
        raise ClassificationError(
            message=f"Classifier returned an out-of-range score: {best['score']!r}"
        ) from e

class RemoteInferenceClassifier:
    """Classifies text by POSTing it to a hosted text-classification model"""

    def __init__(
        self,
        *,
        api_token: Optional[str],
        model_name: str,
        api_url: str = "https://api-inference.huggingface.co/models",
        timeout: float = 30.0,
    ) -> None:
        self.api_token = (api_token or "").strip()
        self.model_name = model_name
        self.endpoint = f"{api_url.rstrip('/')}/{model_name}"
        self.timeout = timeout
        self.model_identifier = model_name

    def classify(self, text: str) -> SentimentResult:
        """
        Classify one review through the inference API

        Args:
            text: Review text (non-empty)

        Returns:
            SentimentResult with the top-scoring label

        Raises:
            InvalidInputError: If text is empty
            ClassificationError: On missing token, HTTP/network failure or malformed response
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError(
                message="Text input is required and must be non-empty"
            )
        if not self.api_token:
            raise ClassificationError(
                message="No API token provided. Set HF_API_TOKEN or use the mock classifier"
            )

        logger.info(f"Calling inference API for model {self.model_name}")
        try:
            response = requests.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.api_token}",
                    "Content-Type": "application/json",
                },
                json={"inputs": text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.exception("Inference API request failed")
            raise ClassificationError(
                message=f"Inference API request failed: {e}"
            ) from e

        if response.status_code >= 400:
            raise ClassificationError(
                message=f"API error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ClassificationError(
                message="Inference API returned a non-JSON body"
            ) from e

        return parse_inference_response(payload)
