"""
Lexical analyzer for the ARKHAM programming language.

This module converts raw source text into a stream of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, literal text, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens, one per call.

Features:
    - Skips whitespace (space, tab, newline, carriage return)
    - Longest-match recognition of operators (`==` and `!=` over `=` and `!`)
    - Recognizes:
        * Identifiers and keywords (ASCII letters, digits, underscore)
        * Integer literals (digits only; a leading `-` is a separate token)
        * Operators and delimiters

The lexer never raises on bad input. Unrecognized characters become ILLEGAL
tokens and the parser decides what to do with them. Once the input is
exhausted every further call returns an EOF token with an empty literal.

Example:
    >>> lexer = Lexer("let x = 5;")
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - is_letter
    - is_digit
    - lookup_ident
    - tokenize
"""

from collections.abc import Callable, Iterator
from typing import Any

from arkham.arkham_constants import (
    MAX_OPERATOR_LENGTH,
    TokenType,
    keywords,
    token_hashmap,
)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token.

    Attributes:
        type (TokenType): The token's category.
        literal (str): The exact source text consumed ("" for EOF).
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: TokenType, literal: str, line: int = 0, col: int = 0):
        self.type = type_
        self.literal = literal
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.literal})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.literal, self.line, self.col))


def is_letter(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def lookup_ident(ident: str) -> TokenType:
    """Returns the keyword type for `ident`, or IDENT if it is not reserved."""
    return keywords.get(ident, TokenType.IDENT)


class Lexer:
    """Lexical analyzer for the ARKHAM language.

    Takes a source string (or a prepared CharacterStream) and hands out one
    Token per `next_token()` call. Iterating over a Lexer yields every token
    up to and including EOF.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, source: "str | CharacterStream") -> None:
        if isinstance(source, CharacterStream):
            self.stream = source
        elif isinstance(source, str):
            self.stream = CharacterStream(source)
        else:
            raise TypeError(
                f"Lexer expects str or CharacterStream, got {type(source).__name__}"
            )

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in " \t\r\n":
            self.advance()

    def read_while(self, predicate: Callable[[str], bool]) -> str:
        """Consumes the maximal run of characters satisfying `predicate`."""
        text = ""
        while not self.stream.end_of_file() and predicate(self.peek()):
            text += self.advance()
        return text

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position."""
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream."""
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenType.EOF, "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if is_letter(ch):
            ident = self.read_while(lambda c: is_letter(c) or is_digit(c))
            return Token(lookup_ident(ident), ident, line, col)

        # 2. Integer
        if is_digit(ch):
            return Token(TokenType.INT, self.read_while(is_digit), line, col)

        # 3. Operator or delimiter
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character
        return Token(TokenType.ILLEGAL, self.advance(), line, col)

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TokenType.EOF:
                return


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely; the last token is always EOF."""
    return list(Lexer(source))


__all__ = [
    "CharacterStream",
    "Lexer",
    "Token",
    "is_digit",
    "is_letter",
    "lookup_ident",
    "tokenize",
]
