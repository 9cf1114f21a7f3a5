"""Display metadata for each action code

The table is configuration data: built-in defaults, optionally overridden by a
JSON file mapping action codes to display bundles.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Mapping, Optional

from pydantic import ValidationError

from config import logger
from src.core import ActionCode, ActionDisplay, InvalidInputError, SentimentLabel

DEFAULT_ACTION_DISPLAY: Dict[ActionCode, ActionDisplay] = {
    ActionCode.OFFER_COUPON: ActionDisplay(
        message="We are truly sorry. As a gesture of goodwill, please accept this discount on your next purchase.",
        icon="fa-gift",
        color="#ef4444",
        tone="negative",
        recommendation="Offer coupon to retain customer and rebuild trust",
    ),
    ActionCode.FLAG_FOR_REVIEW: ActionDisplay(
        message="We're sorry to hear about your experience. Our customer success team will reach out to you shortly.",
        icon="fa-flag",
        color="#f97316",
        tone="negative",
        recommendation="Manual review needed for ambiguous feedback",
    ),
    ActionCode.THANK_CUSTOMER: ActionDisplay(
        message="Thank you for your wonderful feedback! Check out our premium collection for exclusive offers.",
        icon="fa-star",
        color="#28a745",
        tone="positive",
        recommendation="Thank customer and suggest upsell opportunity",
    ),
    ActionCode.NO_ACTION: ActionDisplay(
        message="Thank you for your feedback! We appreciate you taking the time to share your thoughts.",
        icon="fa-check-circle",
        color="#6b7280",
        tone="neutral",
        recommendation="Acknowledge feedback, no special action required",
    ),
    ActionCode.EMERGENCY_CALL: ActionDisplay(
        message="We're very sorry. A senior member of our team will call you personally today.",
        icon="fa-phone",
        color="#b91c1c",
        tone="negative",
        recommendation="Escalate to a retention call within 24 hours",
    ),
    ActionCode.SUGGEST_UPGRADE: ActionDisplay(
        message="Glad things are going well! You may enjoy the extra benefits of our upgraded plan.",
        icon="fa-arrow-up",
        color="#8b5cf6",
        tone="positive",
        recommendation="Present an upgrade offer",
    ),
    ActionCode.THANK_AND_CROSSSELL: ActionDisplay(
        message="Thank you! Customers like you also enjoy these related products.",
        icon="fa-shopping-cart",
        color="#0ea5e9",
        tone="positive",
        recommendation="Thank customer and recommend related products",
    ),
    ActionCode.HUMAN_REVIEW: ActionDisplay(
        message="Thanks for reaching out. A member of our team will look into your feedback.",
        icon="fa-user-check",
        color="#f59e0b",
        tone="neutral",
        recommendation="Route to a human agent for review",
    ),
    ActionCode.REQUEST_FEEDBACK: ActionDisplay(
        message="Thank you! Could you tell us how we can improve?",
        icon="fa-comments",
        color="#6b7280",
        tone="neutral",
        recommendation="Send a short improvement survey",
    ),
    ActionCode.ASK_REFERRAL: ActionDisplay(
        message="Glad you liked it! Refer a friend and earn rewards.",
        icon="fa-user-plus",
        color="#3b82f6",
        tone="positive",
        recommendation="Invite the customer to the referral program",
    ),
    ActionCode.THANK_ONLY: ActionDisplay(
        message="Thank you for your feedback!",
        icon="fa-comment",
        color="#6b7280",
        tone="info",
        recommendation="Default acknowledgment",
    ),
}

# NO_ACTION wording for the label-confidence policy when the label itself is neutral or unrecognized
NO_ACTION_LABEL_DISPLAY: Dict[SentimentLabel, ActionDisplay] = {
    SentimentLabel.NEUTRAL: ActionDisplay(
        message="We appreciate your input! Your feedback helps us improve our products and services.",
        icon="fa-info-circle",
        color="#6b7280",
        tone="neutral",
        recommendation="No intervention needed",
    ),
    SentimentLabel.UNKNOWN: ActionDisplay(
        message="Thank you for your feedback!",
        icon="fa-comment",
        color="#6b7280",
        tone="info",
        recommendation="Default acknowledgment",
    ),
}

def load_action_display(
    path: Optional[str] = None,
    base: Optional[Mapping[ActionCode, ActionDisplay]] = None,
) -> Dict[ActionCode, ActionDisplay]:
    """
    Build the display table, merging overrides from a JSON file

    Args:
        path: Optional JSON file of the form {"OFFER_COUPON": {"message": ..., ...}}
        base: Table to start from (default DEFAULT_ACTION_DISPLAY)

    Returns:
        Mapping from every action code to its display bundle

    Raises:
        InvalidInputError: If the file cannot be read or contains unknown codes
    """
    table = dict(base or DEFAULT_ACTION_DISPLAY)
    if not path:
        return table

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidInputError(
            message=f"Cannot read action display file: {path}"
        ) from e

    if not isinstance(raw, dict):
        raise InvalidInputError(
            message="Action display file must contain a JSON object"
        )

    for code, bundle in raw.items():
        try:
            action = ActionCode(code)
        except ValueError as e:
            raise InvalidInputError(
                message=f"Unknown action code in display file: {code}"
            ) from e
        try:
            current = table[action].model_dump()
            current.update(bundle)
            table[action] = ActionDisplay(**current)
        except (TypeError, ValueError, ValidationError) as e:
            raise InvalidInputError(
                message=f"Invalid display bundle for {code}"
            ) from e

    logger.info(f"Loaded {len(raw)} action display overrides from {path}")
    return table
