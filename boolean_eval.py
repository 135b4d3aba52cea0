"""Boolean expression evaluation for truth tables.

Expressions may mix notations: negation (¬, NOT, !), conjunction (∧, AND,
&, &&, .), disjunction (∨, OR, |, ||, +) and exclusive-or (⊕, XOR, !=, !==),
with parentheses and the literals 0 and 1. Keywords are case-insensitive,
variable names are not.

Precedence from tightest to loosest: NOT, XOR, AND, OR.
"""

import logging
import re
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class BooleanExpressionError(ValueError):
    """Raised when an expression cannot be tokenized, parsed or evaluated."""


# ============================================================================
# Syntax tree
# ============================================================================


class Const(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["const"] = "const"
    value: bool


class Var(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["var"] = "var"
    name: str


class Not(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["not"] = "not"
    operand: "Node"


class BinaryOp(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["binary"] = "binary"
    op: Literal["and", "or", "xor"]
    left: "Node"
    right: "Node"


Node = Union[Const, Var, Not, BinaryOp]

Not.model_rebuild()
BinaryOp.model_rebuild()


# ============================================================================
# Tokenizer
# ============================================================================

_TOKEN_RE = re.compile(
    r"""
    (?P<lparen>\()
    |(?P<rparen>\))
    |(?P<xor>!==|!=|⊕)
    |(?P<not>¬|!)
    |(?P<and>&&|&|∧|\.)
    |(?P<or>\|\||\||∨|\+)
    |(?P<literal>[01])
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)

_KEYWORDS = {"NOT": "not", "AND": "and", "OR": "or", "XOR": "xor"}

# Bounds on parser recursion (parentheses and NOT) and on tree size
MAX_NESTING = 50
MAX_TOKENS = 500


def tokenize(expression: str) -> list[tuple[str, str]]:
    """Split an expression into (kind, text) tokens."""
    if not isinstance(expression, str):
        raise BooleanExpressionError(
            f"Expression must be a string, got {type(expression).__name__}"
        )

    tokens: list[tuple[str, str]] = []
    pos = 0
    while pos < len(expression):
        if expression[pos].isspace():
            pos += 1
            continue

        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            raise BooleanExpressionError(
                f"Unexpected character {expression[pos]!r} at position {pos}"
            )

        kind = match.lastgroup
        text = match.group()
        if kind == "name" and text.upper() in _KEYWORDS:
            kind = _KEYWORDS[text.upper()]
        tokens.append((kind, text))
        pos = match.end()

    return tokens


# ============================================================================
# Parser
# ============================================================================


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, tokens: list[tuple[str, str]]):
        self.tokens = tokens
        self.pos = 0
        self.nesting = 0

    def peek(self) -> str | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][0]
        return None

    def advance(self) -> tuple[str, str]:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def parse(self) -> Node:
        if not self.tokens:
            raise BooleanExpressionError("Empty expression")
        if len(self.tokens) > MAX_TOKENS:
            raise BooleanExpressionError(
                f"Expression too long ({len(self.tokens)} tokens, max {MAX_TOKENS})"
            )
        node = self.parse_or()
        if self.peek() is not None:
            raise BooleanExpressionError(
                f"Unexpected {self.tokens[self.pos][1]!r} after complete expression"
            )
        return node

    def parse_or(self) -> Node:
        node = self.parse_and()
        while self.peek() == "or":
            self.advance()
            node = BinaryOp(op="or", left=node, right=self.parse_and())
        return node

    def parse_and(self) -> Node:
        node = self.parse_xor()
        while self.peek() == "and":
            self.advance()
            node = BinaryOp(op="and", left=node, right=self.parse_xor())
        return node

    def parse_xor(self) -> Node:
        node = self.parse_unary()
        while self.peek() == "xor":
            self.advance()
            node = BinaryOp(op="xor", left=node, right=self.parse_unary())
        return node

    def enter(self) -> None:
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            raise BooleanExpressionError(
                f"Expression nested too deeply (max {MAX_NESTING} levels)"
            )

    def parse_unary(self) -> Node:
        if self.peek() == "not":
            self.advance()
            self.enter()
            operand = self.parse_unary()
            self.nesting -= 1
            return Not(operand=operand)
        return self.parse_primary()

    def parse_primary(self) -> Node:
        kind = self.peek()
        if kind is None:
            raise BooleanExpressionError("Unexpected end of expression")

        _, text = self.advance()
        if kind == "literal":
            return Const(value=text == "1")
        if kind == "name":
            return Var(name=text)
        if kind == "lparen":
            self.enter()
            node = self.parse_or()
            if self.peek() != "rparen":
                raise BooleanExpressionError("Missing closing parenthesis")
            self.advance()
            self.nesting -= 1
            return node
        raise BooleanExpressionError(f"Unexpected {text!r}")


def parse_expression(expression: str) -> Node:
    """Parse an expression into a syntax tree. Raises BooleanExpressionError."""
    return _Parser(tokenize(expression)).parse()


def evaluate(node: Node, values: dict[str, bool]) -> bool:
    """Evaluate a syntax tree against a variable binding."""
    if isinstance(node, Const):
        return node.value
    if isinstance(node, Var):
        try:
            return bool(values[node.name])
        except (KeyError, TypeError):
            raise BooleanExpressionError(f"Unbound variable {node.name!r}") from None
    if isinstance(node, Not):
        return not evaluate(node.operand, values)

    left = evaluate(node.left, values)
    right = evaluate(node.right, values)
    if node.op == "and":
        return left and right
    if node.op == "or":
        return left or right
    return left != right


def evaluate_expression(expression: str, values: dict[str, bool]) -> bool:
    """
    Evaluate an expression, returning False on any parse or binding failure.

    Failures are logged, never raised.
    """
    try:
        return evaluate(parse_expression(expression), values)
    except BooleanExpressionError as exc:
        logger.warning("Could not evaluate %r with %s: %s", expression, values, exc)
        return False


def variable_names(expression: str) -> list[str]:
    """Variable names in order of first appearance."""
    names: list[str] = []
    for kind, text in tokenize(expression):
        if kind == "name" and text not in names:
            names.append(text)
    return names


def assignments(variables: list[str]) -> list[dict[str, bool]]:
    """
    All 2^k assignments of the variables, MSB-first.

    Variable 0 is the highest-order bit of the row index, so the first row
    is all False and the last row is all True.
    """
    k = len(variables)
    rows = []
    for i in range(2**k):
        rows.append(
            {name: bool((i >> (k - 1 - j)) & 1) for j, name in enumerate(variables)}
        )
    return rows


def truth_table(
    expression: str, variables: list[str]
) -> list[tuple[dict[str, bool], bool]]:
    """Rows of (assignment, result) using the fail-safe evaluator."""
    return [
        (values, evaluate_expression(expression, values))
        for values in assignments(variables)
    ]


def truth_column(expression: str, variables: list[str]) -> str:
    """Output column as a comma-joined 0/1 string, e.g. "0,0,0,1"."""
    return ",".join(
        "1" if result else "0" for _, result in truth_table(expression, variables)
    )
