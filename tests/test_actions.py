import json

import pytest

from src.core import ActionCode, InvalidInputError, SentimentResult
from src.engine.actions import LabelConfidencePolicy, ThresholdPolicy, build_policy
from src.engine.display import DEFAULT_ACTION_DISPLAY, load_action_display


@pytest.mark.parametrize(
    "index, expected",
    [
        (0.0, ActionCode.OFFER_COUPON),
        (0.4, ActionCode.OFFER_COUPON),
        (0.41, ActionCode.REQUEST_FEEDBACK),
        (0.69, ActionCode.REQUEST_FEEDBACK),
        (0.7, ActionCode.ASK_REFERRAL),
        (1.0, ActionCode.ASK_REFERRAL),
    ],
)
def test_three_bucket_boundaries(index, expected):
    decision = ThresholdPolicy().select_index(index)
    assert decision.action_code == expected
    assert decision.source_score == index


def test_three_bucket_normalizes_sentiment():
    policy = ThresholdPolicy()
    assert policy.select(SentimentResult(label="POSITIVE", confidence=0.95)).action_code == ActionCode.ASK_REFERRAL
    assert policy.select(SentimentResult(label="NEGATIVE", confidence=0.95)).action_code == ActionCode.OFFER_COUPON
    assert policy.select(SentimentResult(label="NEUTRAL", confidence=0.99)).action_code == ActionCode.REQUEST_FEEDBACK


def test_three_bucket_decision_carries_display_metadata():
    decision = ThresholdPolicy().select_index(0.2)
    bundle = DEFAULT_ACTION_DISPLAY[ActionCode.OFFER_COUPON]
    assert decision.message == bundle.message
    assert decision.color == bundle.color
    assert decision.recommendation == bundle.recommendation


def test_threshold_policy_rejects_inverted_thresholds():
    with pytest.raises(InvalidInputError):
        ThresholdPolicy(low=0.8, high=0.3)


@pytest.mark.parametrize(
    "label, confidence, expected, trigger",
    [
        ("NEGATIVE", 0.71, ActionCode.OFFER_COUPON, "High-confidence negative review"),
        ("NEGATIVE", 0.7, ActionCode.FLAG_FOR_REVIEW, "Low-confidence negative review"),
        ("POSITIVE", 0.9, ActionCode.THANK_CUSTOMER, "High-confidence positive review"),
        ("POSITIVE", 0.7, ActionCode.NO_ACTION, "Low-confidence positive review"),
        ("NEUTRAL", 0.99, ActionCode.NO_ACTION, "Neutral sentiment"),
        ("MIXED", 0.99, ActionCode.NO_ACTION, "Unknown sentiment"),
    ],
)
def test_label_confidence_policy(label, confidence, expected, trigger):
    decision = LabelConfidencePolicy().select(SentimentResult(label=label, confidence=confidence))
    assert decision.action_code == expected
    assert decision.trigger == trigger
    assert decision.source_score == confidence


def test_select_is_pure():
    policy = LabelConfidencePolicy()
    result = SentimentResult(label="NEGATIVE", confidence=0.8)
    assert policy.select(result) == policy.select(result)


def test_build_policy_by_name():
    assert isinstance(build_policy("three_bucket"), ThresholdPolicy)
    assert isinstance(build_policy("label_confidence", confidence_threshold=0.5), LabelConfidencePolicy)
    with pytest.raises(InvalidInputError):
        build_policy("seven_bucket")


def test_display_overrides_from_json(tmp_path):
    path = tmp_path / "display.json"
    path.write_text(json.dumps({"ASK_REFERRAL": {"message": "Tell a friend!"}}), encoding="utf-8")

    table = load_action_display(str(path))
    decision = ThresholdPolicy(display=table).select_index(0.9)

    assert decision.message == "Tell a friend!"
    assert decision.icon == DEFAULT_ACTION_DISPLAY[ActionCode.ASK_REFERRAL].icon


def test_display_overrides_reject_unknown_codes(tmp_path):
    path = tmp_path / "display.json"
    path.write_text(json.dumps({"SEND_FLOWERS": {"message": "Hi"}}), encoding="utf-8")

    with pytest.raises(InvalidInputError):
        load_action_display(str(path))


def test_neutral_and_unknown_labels_get_their_own_wording():
    policy = LabelConfidencePolicy()
    neutral = policy.select(SentimentResult(label="NEUTRAL", confidence=0.65))
    unknown = policy.select(SentimentResult(label="MIXED", confidence=0.65))
    low_positive = policy.select(SentimentResult(label="POSITIVE", confidence=0.6))

    assert neutral.icon == "fa-info-circle"
    assert neutral.message.startswith("We appreciate your input!")
    assert unknown.icon == "fa-comment"
    assert unknown.message == "Thank you for your feedback!"
    assert low_positive.message == DEFAULT_ACTION_DISPLAY[ActionCode.NO_ACTION].message
    assert {neutral.action_code, unknown.action_code, low_positive.action_code} == {ActionCode.NO_ACTION}


def test_label_wording_can_be_disabled():
    decision = LabelConfidencePolicy(label_display={}).select(SentimentResult(label="NEUTRAL", confidence=0.65))
    assert decision.message == DEFAULT_ACTION_DISPLAY[ActionCode.NO_ACTION].message
