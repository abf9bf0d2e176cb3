"""
ARKHAM Language Parser

Parses the token stream produced by `arkham_lexer.Lexer` into an abstract
syntax tree rooted at `arkham_ast.Program`.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * expression statements
  A trailing `;` is optional for all three.

- Expressions (Pratt / precedence climbing, lowest to highest):
    * `==` `!=`
    * `<` `>`
    * `+` `-`
    * `*` `/`
    * prefix `-x` `!x`
    * call `f(a, b)`
  plus integer, boolean and identifier literals, `( ... )` grouping,
  `if (...) { ... } else { ... }` and `fn(a, b) { ... }`.

Parser Behavior
---------------
- Keeps a two-token window (`cur_token`, `peek_token`) and never backtracks.
- Never raises on malformed input. Syntax problems are appended to `errors`
  and parsing continues from the offending token; `parse_program()` always
  returns a Program. Callers must check `errors` before using the result.
- Prefix and infix dispatch tables are built per instance, so parsers never
  share mutable state.

Entry Points
------------
- `Parser(lexer).parse_program()`: parse a whole program.
- `parse_source(source)`: lex + parse a string, returning `(program, errors)`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum

from arkham.arkham_ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from arkham.arkham_constants import INT64_MAX, INT64_MIN, MAX_NESTING_DEPTH, TokenType
from arkham.arkham_lexer import Lexer, Token

logger = logging.getLogger(__name__)

PrefixParseFn = Callable[[], "Expression | None"]
InfixParseFn = Callable[["Expression | None"], "Expression | None"]


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -X or !X
    CALL = 7  # myFunction(X)


precedences: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}


class Parser:
    """
    ARKHAM Parser Class

    Pulls tokens from a Lexer it owns and builds a Program. Each token type is
    bound to at most one prefix behaviour (it can start an expression) and at
    most one infix behaviour (it can continue one).

    Attributes
    ----------
    lexer : Lexer
        Token source, consumed exactly once.
    cur_token : Token
        The token under examination.
    peek_token : Token
        The token after `cur_token`.
    prefix_parse_fns : dict[TokenType, PrefixParseFn]
    infix_parse_fns : dict[TokenType, InfixParseFn]
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self._errors: list[str] = []
        self.depth: int = 0

        self.prefix_parse_fns: dict[TokenType, PrefixParseFn] = {
            TokenType.IDENT: self.parse_identifier,
            TokenType.INT: self.parse_integer_literal,
            TokenType.TRUE: self.parse_boolean,
            TokenType.FALSE: self.parse_boolean,
            TokenType.BANG: self.parse_prefix_expression,
            TokenType.MINUS: self.parse_prefix_expression,
            TokenType.LPAREN: self.parse_grouped_expression,
            TokenType.IF: self.parse_if_expression,
            TokenType.FUNCTION: self.parse_function_literal,
        }

        self.infix_parse_fns: dict[TokenType, InfixParseFn] = {
            tok_type: self.parse_infix_expression
            for tok_type in precedences
            if tok_type != TokenType.LPAREN
        }
        self.infix_parse_fns[TokenType.LPAREN] = self.parse_call_expression

        # Fill both slots of the window
        self.cur_token: Token = self.lexer.next_token()
        self.peek_token: Token = self.lexer.next_token()

    @property
    def errors(self) -> list[str]:
        """Messages recorded so far, in the order they were found."""
        return list(self._errors)

    # Token window

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, tok_type: TokenType) -> bool:
        return self.cur_token.type == tok_type

    def peek_token_is(self, tok_type: TokenType) -> bool:
        return self.peek_token.type == tok_type

    def expect_peek(self, tok_type: TokenType) -> bool:
        """Advances if the next token is `tok_type`; records an error otherwise."""
        if self.peek_token_is(tok_type):
            self.next_token()
            return True
        self.peek_error(tok_type)
        return False

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return precedences.get(self.cur_token.type, Precedence.LOWEST)

    # Diagnostics

    def add_error(self, tok: Token, message: str) -> None:
        msg = f"line {tok.line}, col {tok.col}: {message}"
        logger.debug("parse error: %s", msg)
        self._errors.append(msg)

    def peek_error(self, tok_type: TokenType) -> None:
        self.add_error(
            self.peek_token,
            f"expected next token to be {tok_type.value}, "
            f"got {self.peek_token.type.value} instead",
        )

    def no_prefix_parse_fn_error(self, tok: Token) -> None:
        self.add_error(tok, f"no prefix parse function for {tok.type.value} found")

    # Statements

    def parse_program(self) -> Program:
        """Parse every statement up to EOF. Never raises on bad syntax."""
        statements: list[Statement] = []
        while not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        if self.cur_token_is(TokenType.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement | None:
        let_tok = self.cur_token

        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)

        if not self.expect_peek(TokenType.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        return_tok = self.cur_token

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement:
        stmt_tok = self.cur_token
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

        return ExpressionStatement(stmt_tok, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse `{ ... }`; expects `cur_token` on the opening brace."""
        block_tok = self.cur_token
        statements: list[Statement] = []

        self.next_token()
        while not self.cur_token_is(TokenType.RBRACE):
            if self.cur_token_is(TokenType.EOF):
                self.add_error(
                    self.cur_token,
                    f"expected next token to be {TokenType.RBRACE.value}, "
                    f"got {TokenType.EOF.value} instead",
                )
                break
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return BlockStatement(block_tok, tuple(statements))

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Precedence climbing: keep folding infix operators that bind tighter than `precedence`."""
        if self.depth >= MAX_NESTING_DEPTH:
            self.add_error(self.cur_token, "expression nested too deeply")
            return None

        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token)
            return None

        self.depth += 1
        try:
            left = prefix()

            # every token with a precedence above LOWEST has an infix behaviour
            while (
                not self.peek_token_is(TokenType.SEMICOLON)
                and precedence < self.peek_precedence()
            ):
                self.next_token()
                left = self.infix_parse_fns[self.cur_token.type](left)
        finally:
            self.depth -= 1

        return left

    def parse_identifier(self) -> Identifier:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> IntegerLiteral | None:
        tok = self.cur_token
        try:
            value = int(tok.literal)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.add_error(tok, f"could not parse {tok.literal!r} as integer")
            return None
        return IntegerLiteral(tok, value)

    def parse_boolean(self) -> Boolean:
        return Boolean(self.cur_token, self.cur_token_is(TokenType.TRUE))

    def parse_prefix_expression(self) -> PrefixExpression:
        op_tok = self.cur_token
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(op_tok, op_tok.literal, right)

    def parse_infix_expression(self, left: Expression | None) -> InfixExpression:
        op_tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(op_tok, left, op_tok.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> IfExpression | None:
        if_tok = self.cur_token

        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.RPAREN):
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_function_literal(self) -> FunctionLiteral | None:
        fn_tok = self.cur_token

        if not self.expect_peek(TokenType.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None
        body = self.parse_block_statement()

        return FunctionLiteral(fn_tok, parameters, body)

    def parse_function_parameters(self) -> tuple[Identifier, ...] | None:
        """Parse `a, b, c)`; expects `cur_token` on the opening parenthesis."""
        identifiers: list[Identifier] = []

        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TokenType.IDENT):
            return None
        identifiers.append(self.parse_identifier())

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            identifiers.append(self.parse_identifier())

        if not self.expect_peek(TokenType.RPAREN):
            return None

        return tuple(identifiers)

    def parse_call_expression(self, function: Expression | None) -> CallExpression | None:
        call_tok = self.cur_token
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(call_tok, function, arguments)

    def parse_call_arguments(self) -> tuple[Expression | None, ...] | None:
        args: list[Expression | None] = []

        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return ()

        self.next_token()
        args.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            args.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(TokenType.RPAREN):
            return None

        return tuple(args)


def parse_source(source: str) -> tuple[Program, list[str]]:
    """Lex and parse `source`; returns the program and its error messages."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


__all__ = ["Parser", "Precedence", "parse_source", "precedences"]
