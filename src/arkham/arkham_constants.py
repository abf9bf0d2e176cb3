"""
Token vocabulary and fixed tables for the ARKHAM language.

Everything the lexer and parser need to classify source text lives here:

    TokenType: closed enumeration of lexical categories.
    keywords: reserved word -> TokenType.
    token_hashmap: operator / delimiter text -> TokenType.
    MAX_OPERATOR_LENGTH: longest entry in `token_hashmap`.
    INT64_MIN / INT64_MAX: bounds for integer literals.
"""

from enum import Enum


class TokenType(str, Enum):
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    BANG = "!"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


keywords: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}

token_hashmap: dict[str, TokenType] = {
    "=": TokenType.ASSIGN,
    "==": TokenType.EQ,
    "!": TokenType.BANG,
    "!=": TokenType.NOT_EQ,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

MAX_OPERATOR_LENGTH = max(len(op) for op in token_hashmap)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Nested expressions recurse; deeper input is reported instead of parsed.
# Each level can cost several stack frames (if -> block -> statement).
MAX_NESTING_DEPTH = 100

__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "MAX_NESTING_DEPTH",
    "MAX_OPERATOR_LENGTH",
    "TokenType",
    "keywords",
    "token_hashmap",
]
