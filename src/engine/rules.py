"""Rule language interpreter

Rule text holds a ``[RULES]`` section with one rule per line::

    [RULES]
    // escalate angry VIPs first
    IF sentiment == "NEGATIVE" AND segment == "VIP" THEN RETURN "EMERGENCY_CALL"
    IF churn_score >= 0.7 THEN RETURN "OFFER_COUPON"
    RETURN "NO_ACTION"

Conditions are compiled by a small recursive-descent parser into an AST of
comparisons joined by AND/OR over a fixed set of record fields. Nothing in a
rule is ever executed as code.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from config import logger
from src.core import ActionCode, InvalidInputError, RuleEvaluationError, RuleSyntaxError

ALLOWED_FIELDS = frozenset({
    "sentiment",
    "confidence",
    "churn_score",
    "monthly_charges",
    "segment",
    "tenure_months",
    "contract_type",
})
COMPARISON_OPERATORS = ("==", "!=", ">=", "<=", ">", "<")
RULES_SECTION = "RULES"

_TOKEN_RE = re.compile(
    r"""
    (?P<number>-?(?:\d+(?:\.\d*)?|\.\d+))
    |(?P<string>"[^"]*"|'[^']*')
    |(?P<op>==|!=|>=|<=|>|<)
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<word>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)
_SECTION_RE = re.compile(r"^\[\s*(?P<name>[A-Za-z_ ]+?)\s*\]$")
_CONDITIONAL_RE = re.compile(
    r'^IF\s+(?P<condition>.+?)\s+THEN\s+RETURN\s+"(?P<action>[^"]+)"\s*;?$',
    re.IGNORECASE,
)
_FALLBACK_RE = re.compile(r'^RETURN\s+"(?P<action>[^"]+)"\s*;?$', re.IGNORECASE)

LiteralValue = Union[str, float]

# Condition AST

@dataclass(frozen=True)
class Comparison:
    field: str
    op: str
    literal: LiteralValue

@dataclass(frozen=True)
class And:
    left: "Condition"
    right: "Condition"

@dataclass(frozen=True)
class Or:
    left: "Condition"
    right: "Condition"

Condition = Union[Comparison, And, Or]

# Rules

@dataclass(frozen=True)
class ConditionalRule:
    condition: str
    action: ActionCode

@dataclass(frozen=True)
class FallbackRule:
    action: ActionCode

Rule = Union[ConditionalRule, FallbackRule]

def _tokenize(text: str) -> List[Tuple[str, str]]:
    tokens: List[Tuple[str, str]] = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise RuleEvaluationError(
                message=f"Unexpected character {text[pos]!r} at position {pos}",
                condition=text,
            )
        kind = match.lastgroup
        value = match.group()
        keyword = value.upper()
        if kind == "word" and keyword in ("AND", "OR"):
            kind, value = keyword.lower(), keyword
        tokens.append((kind, value))
        pos = match.end()
    return tokens

class _ConditionParser:
    """
    Recursive-descent parser for rule conditions

    Grammar:
        expr       := and_expr ("OR" and_expr)*
        and_expr   := primary ("AND" primary)*
        primary    := "(" expr ")" | comparison
        comparison := FIELD OP (NUMBER | STRING)
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _error(self, detail: str) -> RuleEvaluationError:
        return RuleEvaluationError(
            message=f"Invalid condition: {detail}",
            condition=self.text,
        )

    def _peek(self) -> Optional[Tuple[str, str]]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self, kind: str) -> str:
        token = self._peek()
        if token is None:
            raise self._error(f"expected {kind} but reached end of condition")
        if token[0] != kind:
            raise self._error(f"expected {kind} but found {token[1]!r}")
        self.pos += 1
        return token[1]

    def parse(self) -> Condition:
        if not self.tokens:
            raise self._error("condition is empty")
        node = self._expr()
        if self._peek() is not None:
            raise self._error(f"unexpected {self._peek()[1]!r}")
        return node

    def _expr(self) -> Condition:
        node = self._and_expr()
        while self._peek() is not None and self._peek()[0] == "or":
            self.pos += 1
            node = Or(node, self._and_expr())
        return node

    def _and_expr(self) -> Condition:
        node = self._primary()
        while self._peek() is not None and self._peek()[0] == "and":
            self.pos += 1
            node = And(node, self._primary())
        return node

    def _primary(self) -> Condition:
        token = self._peek()
        if token is not None and token[0] == "lparen":
            self.pos += 1
            node = self._expr()
            self._take("rparen")
            return node
        return self._comparison()

    def _comparison(self) -> Comparison:
        field = self._take("word")
        if field not in ALLOWED_FIELDS:
            raise self._error(f"unknown field {field!r}")
        op = self._take("op")

        token = self._peek()
        if token is None:
            raise self._error("expected a literal but reached end of condition")
        kind, value = token
        self.pos += 1
        if kind == "number":
            return Comparison(field, op, float(value))
        if kind == "string":
            return Comparison(field, op, value[1:-1])
        raise self._error(f"expected a literal but found {value!r}")

@lru_cache(maxsize=256)
def compile_condition(text: str) -> Condition:
    """
    Compile a condition string into its AST

    Args:
        text: Condition such as 'sentiment == "NEGATIVE" AND confidence >= 0.8'

    Returns:
        Comparison, And or Or node

    Raises:
        RuleEvaluationError: On a syntax error or a field outside ALLOWED_FIELDS
    """
    return _ConditionParser(text).parse()

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _compare(value: Any, op: str, literal: LiteralValue) -> bool:
    if isinstance(value, Enum):
        value = value.value

    if op in ("==", "!="):
        if _is_number(value) and _is_number(literal):
            equal = float(value) == float(literal)
        elif isinstance(value, str) and isinstance(literal, str):
            equal = value == literal
        else:
            equal = False
        return equal if op == "==" else not equal

    if not (_is_number(value) and _is_number(literal)):
        raise RuleEvaluationError(
            message=f"Operator {op} needs numbers, got {value!r} and {literal!r}"
        )
    if op == ">=":
        return value >= literal
    if op == "<=":
        return value <= literal
    if op == ">":
        return value > literal
    return value < literal

def evaluate(node: Condition, record: Mapping[str, Any]) -> bool:
    """
    Evaluate a compiled condition against a record

    Raises:
        RuleEvaluationError: If a referenced field is missing or types do not fit the operator
    """
    if isinstance(node, And):
        return evaluate(node.left, record) and evaluate(node.right, record)
    if isinstance(node, Or):
        return evaluate(node.left, record) or evaluate(node.right, record)
    if node.field not in record:
        raise RuleEvaluationError(
            message=f"Record has no field {node.field!r}"
        )
    return _compare(record[node.field], node.op, node.literal)

def extract_rules_section(text: str) -> List[str]:
    """
    Return the lines of the [RULES] section

    The section ends at the next [SECTION] header (for example [DIAGRAM]).
    Text without any section header is treated as a bare rule list.
    """
    lines = text.splitlines()
    headers = [i for i, line in enumerate(lines) if _SECTION_RE.match(line.strip())]
    if not headers:
        return lines

    section: List[str] = []
    inside = False
    for line in lines:
        header = _SECTION_RE.match(line.strip())
        if header:
            inside = header.group("name").strip().upper() == RULES_SECTION
            continue
        if inside:
            section.append(line)

    if not section:
        logger.warning("Rule text has section headers but no [RULES] section")
    return section

def _action_code(raw: str, line: str) -> ActionCode:
    try:
        return ActionCode(raw.strip().upper())
    except ValueError as e:
        raise RuleSyntaxError(
            message=f"Unknown action code {raw!r}",
            line=line,
        ) from e

def parse_rule_line(line: str) -> Rule:
    """
    Parse a single rule line

    Raises:
        RuleSyntaxError: If the line is not an IF/THEN or RETURN rule
    """
    conditional = _CONDITIONAL_RE.match(line)
    if conditional:
        return ConditionalRule(
            condition=conditional.group("condition").strip(),
            action=_action_code(conditional.group("action"), line),
        )
    fallback = _FALLBACK_RE.match(line)
    if fallback:
        return FallbackRule(action=_action_code(fallback.group("action"), line))
    raise RuleSyntaxError(
        message="Expected 'IF <condition> THEN RETURN \"<ACTION>\"' or 'RETURN \"<ACTION>\"'",
        line=line,
    )

def parse_rules(text: str) -> List[Rule]:
    """
    Parse rule text into an ordered rule list

    Blank lines and '//' comments are ignored. Malformed lines are logged and
    skipped. Parsing the same text twice yields equal lists.

    Args:
        text: Rule source, optionally containing a [RULES] section

    Returns:
        Ordered list of ConditionalRule / FallbackRule
    """
    if not isinstance(text, str):
        raise InvalidInputError(message="Rule text must be a string")

    rules: List[Rule] = []
    fallback_seen = False
    for raw_line in extract_rules_section(text):
        line = raw_line.strip()
        if not line or line.startswith("//"):
            continue
        try:
            rule = parse_rule_line(line)
        except RuleSyntaxError as e:
            logger.warning(f"Skipping rule line {line!r}: {e.message}")
            continue
        if fallback_seen:
            logger.warning(f"Rule {line!r} follows a fallback rule and is unreachable")
        if isinstance(rule, FallbackRule):
            fallback_seen = True
        rules.append(rule)
    return rules

def _record_values(record: Union[Mapping[str, Any], BaseModel]) -> Dict[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    if isinstance(record, Mapping):
        return dict(record)
    raise InvalidInputError(
        message=f"Record must be a mapping or a model, got {type(record).__name__}"
    )

def execute(
    record: Union[Mapping[str, Any], BaseModel],
    rules: Iterable[Rule],
) -> ActionCode:
    """
    Return the action of the first matching rule

    Conditional rules whose condition cannot be compiled or evaluated are
    skipped. A fallback rule always matches.

    Args:
        record: Field values (mapping or pydantic model)
        rules: Ordered rule list

    Returns:
        Action code of the first match, or NO_ACTION when nothing matches
    """
    values = _record_values(record)
    for rule in rules:
        if isinstance(rule, FallbackRule):
            return rule.action
        try:
            matched = evaluate(compile_condition(rule.condition), values)
        except RuleEvaluationError as e:
            logger.warning(f"Skipping rule {rule.condition!r}: {e.message}")
            continue
        if matched:
            return rule.action
    return ActionCode.NO_ACTION

def interpret(text: str, records: Sequence[Union[Mapping[str, Any], BaseModel]]) -> List[ActionCode]:
    """Parse rule text once and execute it for each record"""
    rules = parse_rules(text)
    return [execute(record, rules) for record in records]
