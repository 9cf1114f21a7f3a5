import random

import pytest

from src.core import ActionCode, CustomerRecord, InvalidInputError, SentimentLabel, SimulatedDecision
from src.engine.actions import LabelConfidencePolicy
from src.engine.rules import parse_rules
from src.engine.simulator import (
    ACTION_COSTS,
    compute_kpis,
    generate_records,
    policy_selector,
    segment_for_charges,
    simulate,
)

RULES = parse_rules("""
[RULES]
IF sentiment == "NEGATIVE" AND confidence >= 0.8 THEN RETURN "EMERGENCY_CALL"
IF churn_score >= 0.7 THEN RETURN "OFFER_COUPON"
IF sentiment == "POSITIVE" THEN RETURN "THANK_AND_CROSSSELL"
RETURN "NO_ACTION"
""")


def _decision(churn_score, action):
    record = CustomerRecord(
        id="CUST-0001",
        segment="STANDARD",
        monthly_charges=60.0,
        tenure_months=12,
        contract_type="One year",
        churn_score=churn_score,
        sentiment=SentimentLabel.NEUTRAL,
        confidence=0.7,
    )
    return SimulatedDecision(
        record=record,
        action_code=action,
        cost=ACTION_COSTS[action],
        high_risk=churn_score >= 0.7,
    )


def test_same_seed_gives_identical_kpis():
    first = simulate(RULES, 200, seed=7)
    second = simulate(RULES, 200, seed=7)
    assert first.kpis == second.kpis
    assert [d.record for d in first.results] == [d.record for d in second.results]


def test_different_seeds_give_different_records():
    first = simulate(RULES, 50, seed=1)
    second = simulate(RULES, 50, seed=2)
    assert [d.record for d in first.results] != [d.record for d in second.results]


def test_segment_thresholds():
    assert segment_for_charges(90.0) == "VIP"
    assert segment_for_charges(89.99) == "STANDARD"
    assert segment_for_charges(50.0) == "STANDARD"
    assert segment_for_charges(49.99) == "OTHER"


def test_generated_records_are_consistent():
    records = generate_records(300, random.Random(3))
    assert len(records) == 300
    assert len({r.id for r in records}) == 300
    for record in records:
        assert record.segment == segment_for_charges(record.monthly_charges)
        assert 0.0 <= record.churn_score <= 1.0
        assert 0.5 <= record.confidence <= 1.0
        assert 1 <= record.tenure_months <= 72


def test_kpis_total_cost_and_counts_match_results():
    result = simulate(RULES, 100, seed=11)
    kpis = result.kpis
    assert kpis.record_count == 100
    assert kpis.total_cost == pytest.approx(sum(d.cost for d in result.results))
    assert sum(kpis.action_counts.values()) == 100
    assert kpis.high_risk_count == sum(1 for d in result.results if d.record.churn_score >= 0.7)
    assert kpis.policy_score >= 0


def test_every_high_risk_record_is_covered_by_the_churn_rule():
    kpis = simulate(RULES, 100, seed=5).kpis
    assert kpis.covered_high_risk == kpis.high_risk_count
    assert kpis.coverage == 1.0
    assert kpis.safety_score == 50.0


def test_policy_score_within_budget():
    decisions = [
        _decision(0.9, ActionCode.OFFER_COUPON),
        _decision(0.8, ActionCode.NO_ACTION),
        _decision(0.1, ActionCode.NO_ACTION),
    ]
    kpis = compute_kpis(decisions, budget=100.0)
    assert kpis.total_cost == 25.0
    assert kpis.high_risk_count == 2
    assert kpis.covered_high_risk == 1
    assert kpis.coverage == 0.5
    assert kpis.safety_score == pytest.approx(27.78, abs=0.01)
    assert kpis.efficiency_score == 50.0
    assert kpis.policy_score == 78


def test_policy_score_penalizes_overspend_and_clamps_at_zero():
    decisions = [_decision(0.9, ActionCode.EMERGENCY_CALL) for _ in range(3)]
    kpis = compute_kpis(decisions, budget=100.0)
    assert kpis.total_cost == 300.0
    assert kpis.efficiency_score == pytest.approx(30.0)
    assert kpis.policy_score == 80

    broke = compute_kpis(decisions, budget=0.0, coverage_target=0.9)
    assert broke.efficiency_score == pytest.approx(20.0)

    ruinous = compute_kpis([_decision(0.1, ActionCode.EMERGENCY_CALL)] * 20, budget=0.0)
    assert ruinous.efficiency_score < -50
    assert ruinous.policy_score == 0


def test_no_high_risk_records_counts_as_full_coverage():
    kpis = compute_kpis([_decision(0.2, ActionCode.NO_ACTION)])
    assert kpis.high_risk_count == 0
    assert kpis.coverage == 1.0


def test_simulate_with_policy_selector():
    result = simulate(None, 40, seed=9, selector=policy_selector(LabelConfidencePolicy()))
    allowed = {
        ActionCode.OFFER_COUPON,
        ActionCode.FLAG_FOR_REVIEW,
        ActionCode.THANK_CUSTOMER,
        ActionCode.NO_ACTION,
    }
    assert {d.action_code for d in result.results} <= allowed


def test_simulate_rejects_bad_arguments():
    with pytest.raises(InvalidInputError):
        simulate(RULES, 0)
    with pytest.raises(InvalidInputError):
        simulate(None, 10)
