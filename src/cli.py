"""Command line entry point: analyze reviews, inspect rules, simulate policies"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from config import logger, settings
from src.core import AppError, InvalidInputError
from src.engine.container import get_dispatcher, get_engine, get_policy
from src.engine.rules import parse_rules
from src.engine.simulator import policy_selector, simulate

def _read_rules(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidInputError(message=f"Cannot read rules file: {path}") from e

def _cmd_analyze(args: argparse.Namespace) -> dict:
    engine = get_engine()
    try:
        outcomes = []
        for _ in range(args.count):
            outcome = engine.analyze(args.text) if args.text else engine.analyze_random_review()
            outcomes.append(outcome.model_dump(mode="json"))
    finally:
        get_dispatcher().flush(timeout=settings.webhook_timeout)
    return {"session_id": engine.session_id, "results": outcomes}

def _cmd_rules(args: argparse.Namespace) -> dict:
    rules = parse_rules(_read_rules(args.rules))
    return {
        "rules": [
            {"type": type(rule).__name__, **asdict(rule), "action": rule.action.value}
            for rule in rules
        ]
    }

def _cmd_simulate(args: argparse.Namespace) -> dict:
    seed = args.seed if args.seed is not None else settings.random_seed
    options = dict(
        budget=settings.simulation_budget,
        coverage_target=settings.coverage_target,
        high_risk_threshold=settings.high_risk_threshold,
    )
    if args.rules:
        result = simulate(parse_rules(_read_rules(args.rules)), args.count, seed, **options)
    else:
        result = simulate(None, args.count, seed, selector=policy_selector(get_policy()), **options)

    payload = result.model_dump(mode="json")
    if not args.details:
        payload.pop("results")
    return payload

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Map review sentiment to business actions."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Classify reviews and select actions")
    analyze.add_argument("--text", help="Review to analyze (default: random review from REVIEWS_PATH)")
    analyze.add_argument("--count", type=int, default=1, help="Number of analyses to run")
    analyze.set_defaults(handler=_cmd_analyze)

    rules = sub.add_parser("rules", help="Parse a rule file and print the rule list")
    rules.add_argument("rules", help="Rule text file containing a [RULES] section")
    rules.set_defaults(handler=_cmd_rules)

    sim = sub.add_parser("simulate", help="Score a rule list on synthetic customers")
    sim.add_argument("--rules", help="Rule text file (default: configured ACTION_POLICY)")
    sim.add_argument("--count", type=int, default=50, help="Number of synthetic customers")
    sim.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    sim.add_argument("--details", action="store_true", help="Include per-record results")
    sim.set_defaults(handler=_cmd_simulate)
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        payload = args.handler(args)
    except AppError as e:
        logger.warning(f"AppError: {e}")
        print(json.dumps(e.to_dict(), indent=2))
        return 1
    print(json.dumps(payload, indent=2))
    return 0

if __name__ == "__main__":
    sys.exit(main())
