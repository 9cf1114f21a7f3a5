import pytest

from src.core import ActionCode, CustomerRecord, RuleEvaluationError, SentimentLabel
from src.engine.rules import (
    And,
    Comparison,
    ConditionalRule,
    FallbackRule,
    Or,
    compile_condition,
    evaluate,
    execute,
    extract_rules_section,
    interpret,
    parse_rules,
)

SENTIMENT_RULES = """
[RULES]
// escalate confident complaints
IF sentiment=="NEGATIVE" AND confidence>=0.8 THEN RETURN "EMERGENCY_CALL"
IF sentiment=="NEGATIVE" AND confidence>=0.6 THEN RETURN "OFFER_COUPON"
RETURN "THANK_ONLY"
"""


@pytest.mark.parametrize(
    "confidence, expected",
    [
        (0.85, ActionCode.EMERGENCY_CALL),
        (0.65, ActionCode.OFFER_COUPON),
        (0.3, ActionCode.THANK_ONLY),
    ],
)
def test_execute_first_match_wins(confidence, expected):
    rules = parse_rules(SENTIMENT_RULES)
    assert execute({"sentiment": "NEGATIVE", "confidence": confidence}, rules) == expected


def test_parse_rules_builds_ordered_rule_list():
    rules = parse_rules(SENTIMENT_RULES)
    assert rules == [
        ConditionalRule('sentiment=="NEGATIVE" AND confidence>=0.8', ActionCode.EMERGENCY_CALL),
        ConditionalRule('sentiment=="NEGATIVE" AND confidence>=0.6', ActionCode.OFFER_COUPON),
        FallbackRule(ActionCode.THANK_ONLY),
    ]


def test_parse_rules_is_idempotent():
    assert parse_rules(SENTIMENT_RULES) == parse_rules(SENTIMENT_RULES)


def test_parse_rules_stops_at_next_section():
    text = SENTIMENT_RULES + "\n[DIAGRAM]\nRETURN \"NO_ACTION\"\ngraph TD\n"
    rules = parse_rules(text)
    assert rules[-1] == FallbackRule(ActionCode.THANK_ONLY)
    assert len(rules) == 3


def test_text_without_header_is_a_bare_rule_list():
    assert extract_rules_section('RETURN "NO_ACTION"') == ['RETURN "NO_ACTION"']
    assert parse_rules('RETURN "NO_ACTION"') == [FallbackRule(ActionCode.NO_ACTION)]


def test_parse_rules_skips_malformed_lines_and_unknown_actions():
    text = """[RULES]
    WHEN confidence > 0.5 DO "OFFER_COUPON"
    IF confidence > 0.5 THEN RETURN "SEND_FLOWERS"
    RETURN "NO_ACTION"
    """
    assert parse_rules(text) == [FallbackRule(ActionCode.NO_ACTION)]


def test_malformed_condition_is_skipped_in_favour_of_fallback():
    text = """[RULES]
    IF sentiment == == "NEGATIVE" THEN RETURN "EMERGENCY_CALL"
    RETURN "THANK_ONLY"
    """
    rules = parse_rules(text)
    assert len(rules) == 2
    assert execute({"sentiment": "NEGATIVE", "confidence": 0.9}, rules) == ActionCode.THANK_ONLY


def test_unknown_field_and_code_injection_are_rejected():
    with pytest.raises(RuleEvaluationError):
        compile_condition("balance > 10")
    with pytest.raises(RuleEvaluationError):
        compile_condition('__import__("os").system("echo hi") == 0')
    with pytest.raises(RuleEvaluationError):
        compile_condition("confidence > 0.5; confidence < 1")


def test_exhausted_rules_return_no_action():
    rules = [ConditionalRule('segment == "VIP"', ActionCode.SUGGEST_UPGRADE)]
    assert execute({"segment": "OTHER"}, rules) == ActionCode.NO_ACTION
    assert execute({"segment": "OTHER"}, []) == ActionCode.NO_ACTION


def test_compile_condition_builds_ast_with_precedence():
    node = compile_condition('segment == "VIP" OR churn_score >= 0.7 AND monthly_charges < 50')
    assert node == Or(
        Comparison("segment", "==", "VIP"),
        And(
            Comparison("churn_score", ">=", 0.7),
            Comparison("monthly_charges", "<", 50.0),
        ),
    )


def test_parentheses_override_precedence():
    record = {"segment": "VIP", "churn_score": 0.2, "monthly_charges": 95.0}
    assert evaluate(compile_condition('segment == "VIP" OR churn_score >= 0.7 AND monthly_charges < 50'), record)
    assert not evaluate(compile_condition('(segment == "VIP" OR churn_score >= 0.7) AND monthly_charges < 50'), record)


def test_keywords_are_case_insensitive_and_single_quotes_allowed():
    node = compile_condition("segment != 'OTHER' and tenure_months <= 12")
    assert evaluate(node, {"segment": "VIP", "tenure_months": 6})


def test_ordering_comparison_on_strings_is_an_evaluation_error():
    with pytest.raises(RuleEvaluationError):
        evaluate(compile_condition('segment > "A"'), {"segment": "VIP"})


def test_equality_across_types_is_false():
    assert not evaluate(compile_condition('confidence == "0.9"'), {"confidence": 0.9})
    assert evaluate(compile_condition('confidence != "0.9"'), {"confidence": 0.9})


def test_missing_field_skips_rule():
    rules = [
        ConditionalRule("churn_score >= 0.5", ActionCode.OFFER_COUPON),
        FallbackRule(ActionCode.THANK_ONLY),
    ]
    assert execute({"sentiment": "POSITIVE"}, rules) == ActionCode.THANK_ONLY


def test_execute_accepts_customer_records():
    record = CustomerRecord(
        id="CUST-0001",
        segment="VIP",
        monthly_charges=99.0,
        tenure_months=24,
        contract_type="Two year",
        churn_score=0.75,
        sentiment=SentimentLabel.NEGATIVE,
        confidence=0.82,
    )
    assert interpret(SENTIMENT_RULES, [record]) == [ActionCode.EMERGENCY_CALL]
