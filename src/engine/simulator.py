"""Batch simulation of an action policy over synthetic customers

All randomness comes from a seeded ``random.Random`` so runs are reproducible.
"""
from __future__ import annotations

import random
from collections import Counter
from typing import Callable, List, Mapping, Optional, Sequence

from config import logger
from src.core import (
    ActionCode,
    CustomerRecord,
    InvalidInputError,
    SentimentLabel,
    SentimentResult,
    SimulatedDecision,
    SimulationKPIs,
    SimulationResult,
)
from src.engine.actions import ActionPolicy
from src.engine.rules import Rule, execute

VIP_CHARGES = 90.0
STANDARD_CHARGES = 50.0
CONTRACT_TYPES = ("Month-to-month", "One year", "Two year")
SIMULATED_SENTIMENTS = (SentimentLabel.POSITIVE, SentimentLabel.NEGATIVE, SentimentLabel.NEUTRAL)

HIGH_RISK_THRESHOLD = 0.7
COVERAGE_TARGET = 0.9
DEFAULT_BUDGET = 1000.0
MAX_SAFETY_SCORE = 50.0
MAX_EFFICIENCY_SCORE = 50.0
OVER_BUDGET_PENALTY = 0.1

ACTION_COSTS: Mapping[ActionCode, float] = {
    ActionCode.EMERGENCY_CALL: 100.0,
    ActionCode.OFFER_COUPON: 25.0,
    ActionCode.HUMAN_REVIEW: 15.0,
    ActionCode.FLAG_FOR_REVIEW: 15.0,
    ActionCode.SUGGEST_UPGRADE: 10.0,
    ActionCode.THANK_AND_CROSSSELL: 5.0,
    ActionCode.THANK_ONLY: 0.0,
    ActionCode.NO_ACTION: 0.0,
}

RecordSelector = Callable[[CustomerRecord], ActionCode]

def segment_for_charges(monthly_charges: float) -> str:
    """VIP at 90 and above, STANDARD at 50 and above, otherwise OTHER"""
    if monthly_charges >= VIP_CHARGES:
        return "VIP"
    if monthly_charges >= STANDARD_CHARGES:
        return "STANDARD"
    return "OTHER"

def generate_record(index: int, rng: random.Random) -> CustomerRecord:
    """
    Generate one synthetic customer

    Churn score starts uniform in [0, 0.5], gains 0.4 on a coin flip and
    loses 0.1 for VIP customers, clamped to [0, 1].
    """
    monthly_charges = round(rng.uniform(20.0, 120.0), 2)
    segment = segment_for_charges(monthly_charges)

    churn = rng.uniform(0.0, 0.5)
    if rng.random() < 0.5:
        churn += 0.4
    if segment == "VIP":
        churn -= 0.1
    churn = round(min(1.0, max(0.0, churn)), 2)

    return CustomerRecord(
        id=f"CUST-{index + 1:04d}",
        segment=segment,
        monthly_charges=monthly_charges,
        tenure_months=rng.randint(1, 72),
        contract_type=rng.choice(CONTRACT_TYPES),
        churn_score=churn,
        sentiment=rng.choice(SIMULATED_SENTIMENTS),
        confidence=round(rng.uniform(0.5, 1.0), 2),
    )

def generate_records(count: int, rng: random.Random) -> List[CustomerRecord]:
    return [generate_record(i, rng) for i in range(count)]

def policy_selector(policy: ActionPolicy) -> RecordSelector:
    """Selector applying a sentiment action policy to each record's sentiment and confidence"""
    def _select(record: CustomerRecord) -> ActionCode:
        result = SentimentResult(label=record.sentiment, confidence=record.confidence)
        return policy.select(result).action_code
    return _select

def action_cost(action: ActionCode) -> float:
    return float(ACTION_COSTS.get(action, 0.0))

def compute_kpis(
    decisions: Sequence[SimulatedDecision],
    *,
    budget: float = DEFAULT_BUDGET,
    coverage_target: float = COVERAGE_TARGET,
) -> SimulationKPIs:
    """
    Aggregate cost, high-risk coverage and the composite policy score

    safety     = min(50, coverage / coverage_target * 50)
    efficiency = 50 when total cost is within budget,
                 otherwise 50 - 0.1 * (total cost - budget)
    score      = round(max(0, safety + efficiency))

    Coverage is 1.0 when the batch has no high-risk records.
    """
    total_cost = sum(d.cost for d in decisions)
    high_risk = [d for d in decisions if d.high_risk]
    covered = sum(1 for d in high_risk if d.action_code != ActionCode.NO_ACTION)
    coverage = covered / len(high_risk) if high_risk else 1.0

    safety = min(MAX_SAFETY_SCORE, coverage / coverage_target * MAX_SAFETY_SCORE)
    if total_cost <= budget:
        efficiency = MAX_EFFICIENCY_SCORE
    else:
        efficiency = MAX_EFFICIENCY_SCORE - OVER_BUDGET_PENALTY * (total_cost - budget)

    counts = Counter(d.action_code.value for d in decisions)
    return SimulationKPIs(
        record_count=len(decisions),
        total_cost=round(total_cost, 2),
        high_risk_count=len(high_risk),
        covered_high_risk=covered,
        coverage=round(coverage, 4),
        safety_score=round(safety, 2),
        efficiency_score=round(efficiency, 2),
        policy_score=int(round(max(0.0, safety + efficiency))),
        action_counts=dict(sorted(counts.items())),
    )

def simulate(
    rules: Optional[Sequence[Rule]],
    record_count: int,
    seed: Optional[int] = None,
    *,
    selector: Optional[RecordSelector] = None,
    budget: float = DEFAULT_BUDGET,
    coverage_target: float = COVERAGE_TARGET,
    high_risk_threshold: float = HIGH_RISK_THRESHOLD,
) -> SimulationResult:
    """
    Run a rule list (or a record selector) over synthetic customers

    Args:
        rules: Parsed rule list; ignored when selector is given
        record_count: Number of synthetic records to generate (>= 1)
        seed: Random seed; the same seed and rules give identical results
        selector: Optional callable choosing the action for a record
        budget: Cost allowed before the efficiency penalty applies
        coverage_target: Coverage that earns the full safety score
        high_risk_threshold: Churn score at which a record counts as high risk

    Returns:
        SimulationResult with per-record decisions and KPIs

    Raises:
        InvalidInputError: If record_count < 1 or neither rules nor selector is given
    """
    if isinstance(record_count, bool) or not isinstance(record_count, int) or record_count < 1:
        raise InvalidInputError(
            message=f"record_count must be a positive integer, got {record_count!r}"
        )
    if selector is None:
        if rules is None:
            raise InvalidInputError(message="Either rules or a selector is required")
        rule_list = list(rules)
        selector = lambda record: execute(record, rule_list)

    rng = random.Random(seed)
    decisions: List[SimulatedDecision] = []
    for record in generate_records(record_count, rng):
        action = ActionCode(selector(record))
        decisions.append(
            SimulatedDecision(
                record=record,
                action_code=action,
                cost=action_cost(action),
                high_risk=record.churn_score >= high_risk_threshold,
            )
        )

    kpis = compute_kpis(decisions, budget=budget, coverage_target=coverage_target)
    logger.info(
        f"Simulated {kpis.record_count} records: cost={kpis.total_cost} "
        f"coverage={kpis.coverage:.2%} score={kpis.policy_score}"
    )
    return SimulationResult(seed=seed, results=decisions, kpis=kpis)
