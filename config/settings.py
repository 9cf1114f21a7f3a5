"""Application settings loaded from .env file"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from typing import Optional, Literal

LOG_LEVEL = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
CLASSIFIER_BACKEND = Literal["auto", "remote", "local", "mock"]
ACTION_POLICY = Literal["three_bucket", "label_confidence"]

class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables (.env)
    """
    # Logging configuration
    log_level: LOG_LEVEL = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)"
    )
    log_format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s:%(lineno)d - %(message)s",
        description="Default log format (can be customized if needed)"
    )
    log_date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date/time format for logs"
    )
    log_to_file: bool = Field(
        default=False,
        description="If true, enable logging to a file"
    )
    log_file_path: str = Field(
        default="logs/app.log",
        description="Path to log file"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation interval"
    )
    log_file_retention: int = Field(
        default=7,
        ge=1,
        description="Number of days to retain log files"
    )

    # Sentiment classifier
    classifier_backend: CLASSIFIER_BACKEND = Field(
        default="auto",
        description="Classifier to use: remote, local, mock, or auto (remote when a token is set, otherwise mock)"
    )
    hf_api_token: Optional[str] = Field(
        default=None,
        description="Hugging Face API token for the remote inference API"
    )
    inference_api_url: str = Field(
        default="https://api-inference.huggingface.co/models",
        description="Base URL of the hosted inference API"
    )
    remote_model_name: str = Field(
        default="siebert/sentiment-roberta-large-english",
        description="Model served by the remote inference API"
    )
    local_model_name: str = Field(
        default="distilbert/distilbert-base-uncased-finetuned-sst-2-english",
        description="Hugging Face model name for the local text-classification pipeline"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for remote inference requests"
    )

    # Review source
    reviews_path: str = Field(
        default="data/reviews_test.tsv",
        description="TSV file of reviews (header column 'text', or one review per line)"
    )

    # Action policy
    action_policy: ACTION_POLICY = Field(
        default="three_bucket",
        description="three_bucket (positivity index) or label_confidence (label + confidence)"
    )
    low_threshold: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Positivity index at or below which a coupon is offered"
    )
    high_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Positivity index at or above which a referral is requested"
    )
    confidence_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Confidence above which the label_confidence policy escalates"
    )
    action_display_path: Optional[str] = Field(
        default=None,
        description="Optional JSON file overriding the per-action display table"
    )

    # Event logging webhook
    webhook_url: Optional[str] = Field(
        default=None,
        description="Spreadsheet webhook (Google Apps Script web app) receiving analysis events"
    )
    webhook_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Timeout in seconds for webhook deliveries"
    )
    webhook_max_retries: int = Field(
        default=0,
        ge=0,
        description="Extra delivery attempts after a failed webhook call"
    )

    # Batch simulation
    simulation_budget: float = Field(
        default=1000.0,
        ge=0.0,
        description="Total action cost the simulated policy may spend without penalty"
    )
    coverage_target: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="High-risk coverage that earns the full safety score"
    )
    high_risk_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Churn score at or above which a record counts as high risk"
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for review selection, mock results and simulations"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if self.low_threshold >= self.high_threshold:
            raise ValueError("low_threshold must be lower than high_threshold")
        return self

settings = Settings()
