"""Lexer/tokenizer for the SLAC expression language.

Converts expression strings into a sequence of tokens for the parser.

Token kinds:
- Literals: numbers (42, 3.14, .5), strings ('text'), booleans (true, false)
- Identifiers: variable and function names (letters, digits, '_' and '-')
- Keywords: and, or, xor, not, div, mod (case-insensitive)
- Operators and punctuation: + - * / = <> < <= > >= ( ) [ ] ,
"""

import re
from typing import Iterator

from slac.errors import LexerError, SyntaxErrorKind
from slac.token import Token, TokenType
from slac.value import Boolean, Number, String

_NUMBER = "number"
_STRING = "string"
_WORD = "word"

# Token patterns (order matters - longer matches first)
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"[ \t\r\n]+", None),

    # Two character operators (before single character)
    (r">=", TokenType.GREATER_EQUAL),
    (r"<=", TokenType.LESS_EQUAL),
    (r"<>", TokenType.NOT_EQUAL),

    # Single character operators
    (r">", TokenType.GREATER),
    (r"<", TokenType.LESS),
    (r"=", TokenType.EQUAL),
    (r"\+", TokenType.PLUS),
    (r"-", TokenType.MINUS),
    (r"\*", TokenType.STAR),
    (r"/", TokenType.SLASH),

    # Punctuation
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r"\[", TokenType.LBRACKET),
    (r"\]", TokenType.RBRACKET),
    (r",", TokenType.COMMA),

    # Numbers: digits with an optional fraction, or a leading '.'.
    # A trailing '.' is kept with its digits so the error names both.
    (r"\d+\.(?!\d)|\d+(?:\.\d+)?|\.\d*", _NUMBER),

    # Strings are single quoted and have no escapes
    (r"'[^']*'", _STRING),

    # Keywords and identifiers
    (r"[^\W\d][\w-]*", _WORD),
]

# Keywords that map to specific tokens
KEYWORDS = {
    "true": Token(TokenType.LITERAL, Boolean(True)),
    "false": Token(TokenType.LITERAL, Boolean(False)),
    "and": Token(TokenType.AND),
    "or": Token(TokenType.OR),
    "xor": Token(TokenType.XOR),
    "not": Token(TokenType.NOT),
    "div": Token(TokenType.DIV),
    "mod": Token(TokenType.MOD),
}

_COMPILED_PATTERNS = [
    (re.compile(pattern), kind) for pattern, kind in TOKEN_PATTERNS
]


class Lexer:
    """Tokenizer for the expression language.

    Usage:
        lexer = Lexer("50 * 3 > 149")
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            if token is None:
                break
            yield token

    def next_token(self) -> Token | None:
        """Get the next token from the source, or None at the end."""
        while self.position < len(self.source):
            for pattern, kind in _COMPILED_PATTERNS:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                self._fail_at_current()

            text = match.group()
            start = self.position
            self.position = match.end()

            # Skip whitespace
            if kind is None:
                continue

            if kind == _NUMBER:
                return self._number(text, start)
            if kind == _STRING:
                return Token(TokenType.LITERAL, String(text[1:-1]))
            if kind == _WORD:
                return KEYWORDS.get(text.lower(), Token(TokenType.IDENTIFIER, text))
            return Token(kind)

        return None

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return the list of tokens.

        Raises:
            LexerError: On any invalid input, including an empty expression
        """
        tokens = list(self)
        if not tokens:
            raise LexerError(
                SyntaxErrorKind.NO_VALID_TOKENS, "No valid tokens", self.position
            )
        return tokens

    def _number(self, text: str, start: int) -> Token:
        invalid = LexerError(
            SyntaxErrorKind.INVALID_NUMBER, f"Invalid number '{text}'", start
        )
        if text.endswith("."):
            raise invalid
        try:
            number = float(text)
        except ValueError:
            raise invalid from None
        return Token(TokenType.LITERAL, Number(number))

    def _fail_at_current(self) -> None:
        char = self.source[self.position]
        if char == "'":
            raise LexerError(
                SyntaxErrorKind.UNTERMINATED_STRING_LITERAL,
                "Unterminated string literal",
                self.position,
            )
        raise LexerError(
            SyntaxErrorKind.INVALID_CHARACTER,
            f"Unexpected character '{char}'",
            self.position,
        )


def tokenize(source: str) -> list[Token]:
    """Convenience function to tokenize an expression string."""
    return Lexer(source).tokenize()
