"""
Defines the abstract syntax tree (AST) node structure for the ARKHAM programming language.

The node set is closed: four statement variants and eight expression variants,
all frozen dataclasses, rooted at `Program`. A parent owns its children
exclusively and nothing is mutated after the parser builds it.

Every node supports:
    token_literal(): the literal text of the token the node originated from.
    __str__(): the canonical rendering. Prefix and infix expressions are fully
        parenthesized so that operator precedence outcomes are visible, e.g.
        `a + b * c` renders as `(a + (b * c))`.
    to_dict(): an `ASTDict` suitable for JSON output or debugging.

Equality is structural. The originating token (and with it the source
position) is excluded from comparisons, so a tree re-parsed from its own
rendering compares equal to the original.

Child slots that failed to parse hold None and render as an empty string.
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict, Union

from arkham.arkham_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    Serialized shape of a node.

    Fields:
        kind (str): The node class name (e.g. "InfixExpression").
        value (Any): Identifier name, literal value or operator; None otherwise.
        line (int): Line of the originating token.
        col (int): Column of the originating token.
        children (list[ASTDict | None]): Child nodes in source order.
    """

    kind: str
    value: Any
    line: int
    col: int
    children: list[Union["ASTDict", None]]


def _node_field() -> Any:
    return field(compare=False, repr=False)


def _render(node: Any) -> str:
    return "" if node is None else str(node)


def _serialize(node: Any) -> ASTDict | None:
    return None if node is None else node.to_dict()


def _make_dict(token: Token, kind: str, value: Any, children: list[Any]) -> ASTDict:
    return {
        "kind": kind,
        "value": value,
        "line": token.line,
        "col": token.col,
        "children": [_serialize(c) for c in children],
    }


# Expressions


@dataclass(frozen=True)
class Identifier:
    token: Token = _node_field()
    value: str = ""

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.value

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "Identifier", self.value, [])


@dataclass(frozen=True)
class IntegerLiteral:
    token: Token = _node_field()
    value: int = 0

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.token.literal

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "IntegerLiteral", self.value, [])


@dataclass(frozen=True)
class Boolean:
    token: Token = _node_field()
    value: bool = False

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.token.literal

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "Boolean", self.value, [])


@dataclass(frozen=True)
class PrefixExpression:
    """Unary `-x` or `!x`; renders as `(-x)`."""

    token: Token = _node_field()
    operator: str = ""
    right: "Expression | None" = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return f"({self.operator}{_render(self.right)})"

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "PrefixExpression", self.operator, [self.right])


@dataclass(frozen=True)
class InfixExpression:
    """Binary operation; renders as `(left op right)`."""

    token: Token = _node_field()
    left: "Expression | None" = None
    operator: str = ""
    right: "Expression | None" = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return f"({_render(self.left)} {self.operator} {_render(self.right)})"

    def to_dict(self) -> ASTDict:
        return _make_dict(
            self.token, "InfixExpression", self.operator, [self.left, self.right]
        )


@dataclass(frozen=True)
class IfExpression:
    token: Token = _node_field()
    condition: "Expression | None" = None
    consequence: "BlockStatement | None" = None
    alternative: "BlockStatement | None" = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        out = f"if ({_render(self.condition)}) {_braced(self.consequence)}"
        if self.alternative is not None:
            out += f" else {_braced(self.alternative)}"
        return out

    def to_dict(self) -> ASTDict:
        return _make_dict(
            self.token,
            "IfExpression",
            None,
            [self.condition, self.consequence, self.alternative],
        )


@dataclass(frozen=True)
class FunctionLiteral:
    token: Token = _node_field()
    parameters: tuple[Identifier, ...] = ()
    body: "BlockStatement | None" = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {_braced(self.body)}"

    def to_dict(self) -> ASTDict:
        return _make_dict(
            self.token, "FunctionLiteral", None, [*self.parameters, self.body]
        )


@dataclass(frozen=True)
class CallExpression:
    """`function(arguments...)`; `token` is the opening parenthesis."""

    token: Token = _node_field()
    function: "Expression | None" = None
    arguments: tuple["Expression | None", ...] = ()

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        args = ", ".join(_render(a) for a in self.arguments)
        return f"{_render(self.function)}({args})"

    def to_dict(self) -> ASTDict:
        return _make_dict(
            self.token, "CallExpression", None, [self.function, *self.arguments]
        )


Expression = Union[
    Identifier,
    IntegerLiteral,
    Boolean,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]


# Statements


@dataclass(frozen=True)
class LetStatement:
    token: Token = _node_field()
    name: Identifier | None = None
    value: Expression | None = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return f"{self.token_literal()} {_render(self.name)} = {_render(self.value)};"

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "LetStatement", None, [self.name, self.value])


@dataclass(frozen=True)
class ReturnStatement:
    token: Token = _node_field()
    return_value: Expression | None = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return f"{self.token_literal()} {_render(self.return_value)};"

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "ReturnStatement", None, [self.return_value])


@dataclass(frozen=True)
class ExpressionStatement:
    token: Token = _node_field()
    expression: Expression | None = None

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return _render(self.expression)

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "ExpressionStatement", None, [self.expression])


@dataclass(frozen=True)
class BlockStatement:
    """`{ ... }` body of an if branch or function literal."""

    token: Token = _node_field()
    statements: tuple["Statement", ...] = ()

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def to_dict(self) -> ASTDict:
        return _make_dict(self.token, "BlockStatement", None, list(self.statements))


Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]


def _terminated(stmt: Statement) -> str:
    # let/return already end in ';'
    if isinstance(stmt, ExpressionStatement):
        return f"{stmt};"
    return str(stmt)


def _braced(block: BlockStatement | None) -> str:
    """Renders a block with braces and `;`-terminated statements so it re-parses."""
    if block is None or not block.statements:
        return "{ }"
    return "{ " + " ".join(_terminated(s) for s in block.statements) + " }"


@dataclass(frozen=True)
class Program:
    """Root node: the ordered top-level statements of one parse."""

    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def to_dict(self) -> ASTDict:
        # no token of its own; positioned at the first statement
        line, col = 0, 0
        if self.statements:
            line, col = self.statements[0].token.line, self.statements[0].token.col
        return {
            "kind": "Program",
            "value": None,
            "line": line,
            "col": col,
            "children": [s.to_dict() for s in self.statements],
        }


__all__ = [
    "ASTDict",
    "BlockStatement",
    "Boolean",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
]
