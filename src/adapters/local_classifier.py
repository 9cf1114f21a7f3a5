"""Sentiment classifier running a local transformers pipeline"""
import torch
from transformers import pipeline

from config import logger
from src.core import AppError, ClassificationError, InvalidInputError, ModelNotLoadedError, SentimentResult
from src.adapters.remote_classifier import parse_inference_response

DEVICE = torch.device("cuda" if torch.cuda.is_available() else "cpu")

class LocalPipelineClassifier:
    """
    Text-classification pipeline loaded once from the Hugging Face hub
    """

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        self.model_identifier = model_name
        logger.info(f"Loading model: {self.model_name}")

        try:
            self.pipeline = pipeline(
                "text-classification",
                model=self.model_name,
                device=DEVICE,
            )
        except Exception as e:
            logger.exception("Failed to load model")
            raise ModelNotLoadedError(
                message=f"Failed to load sentiment model '{self.model_name}'"
            ) from e

        logger.info("Sentiment model ready")

    @torch.no_grad()
    def classify(self, text: str) -> SentimentResult:
        """
        Classify one review with the local model

        Args:
            text: Input text string (non-empty)

        Returns:
            SentimentResult with the top label

        Raises:
            InvalidInputError: If text is empty or not a string
            ClassificationError: If inference fails or returns an unexpected shape
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError(
                message="Text input is required and must be non-empty"
            )

        try:
            output = self.pipeline(text, truncation=True)
            return parse_inference_response(output)
        except AppError:
            raise
        except Exception as e:
            logger.exception("Local sentiment inference failed")
            raise ClassificationError(
                message="Local sentiment inference failed"
            ) from e
