"""
Decision engine module
"""

from .normalizer import normalize, positivity_index
from .display import DEFAULT_ACTION_DISPLAY, load_action_display
from .actions import ActionPolicy, ThresholdPolicy, LabelConfidencePolicy, build_policy
from .rules import (
    ConditionalRule,
    FallbackRule,
    compile_condition,
    evaluate,
    execute,
    parse_rules,
)
from .simulator import ACTION_COSTS, compute_kpis, generate_records, policy_selector, simulate
from .dispatcher import EventDispatcher
from .service import ReviewAnalysisEngine, generate_session_id

__all__ = [
    "normalize",
    "positivity_index",
    "DEFAULT_ACTION_DISPLAY",
    "load_action_display",
    "ActionPolicy",
    "ThresholdPolicy",
    "LabelConfidencePolicy",
    "build_policy",
    "ConditionalRule",
    "FallbackRule",
    "compile_condition",
    "evaluate",
    "execute",
    "parse_rules",
    "ACTION_COSTS",
    "compute_kpis",
    "generate_records",
    "policy_selector",
    "simulate",
    "EventDispatcher",
    "ReviewAnalysisEngine",
    "generate_session_id",
]
