"""Parser for the SLAC expression language.

Converts a sequence of tokens into an Abstract Syntax Tree (AST).
Uses precedence climbing (Pratt parsing): every infix token carries a
binding power and binary operators parse their right operand one level
higher than their own, which makes chains left-associative.

Operator Precedence (lowest to highest):
1. or xor
2. and
3. = <>
4. < <= > >=
5. + -
6. * / div mod
7. not - (unary)
8. () (function call)
"""

from slac.ast import Array, Binary, Call, Expression, Literal, Operator, Unary, Variable
from slac.errors import ParseError, SyntaxErrorKind
from slac.lexer import Lexer
from slac.token import Precedence, Token, TokenType, precedence_of

_BINARY_TOKENS = frozenset(
    {
        TokenType.PLUS,
        TokenType.MINUS,
        TokenType.STAR,
        TokenType.SLASH,
        TokenType.DIV,
        TokenType.MOD,
        TokenType.EQUAL,
        TokenType.NOT_EQUAL,
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
        TokenType.AND,
        TokenType.OR,
        TokenType.XOR,
    }
)


class Parser:
    """Precedence climbing parser for the expression language.

    Usage:
        tokens = Lexer("1 + 2 * 3").tokenize()
        ast = Parser(tokens).parse()
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.position = 0

    def parse(self) -> Expression:
        """Parse the tokens and return the AST root."""
        if not self.tokens:
            raise ParseError(SyntaxErrorKind.NO_VALID_TOKENS, "Empty expression")

        try:
            expression = self._expression()
        except RecursionError:
            raise ParseError(
                SyntaxErrorKind.NESTING_TOO_DEEP, "Expression is nested too deeply"
            ) from None

        if not self._is_at_end():
            raise ParseError(
                SyntaxErrorKind.MULTIPLE_EXPRESSIONS,
                f"Expected end of expression, found {self._current().describe()}",
            )

        return expression

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        """Get current token (only valid when not at the end)."""
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        """Check if we've consumed all tokens."""
        return self.position >= len(self.tokens)

    def _match(self, token_type: TokenType) -> bool:
        """Check if the current token has the given type."""
        return not self._is_at_end() and self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        if self._is_at_end():
            raise ParseError(SyntaxErrorKind.UNEXPECTED_END, "Unexpected end of expression")
        token = self._current()
        self.position += 1
        return token

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume a token of the expected type, or raise error."""
        if self._match(token_type):
            return self._advance()
        found = "end of expression" if self._is_at_end() else self._current().describe()
        raise ParseError(SyntaxErrorKind.EXPECTED_TOKEN, f"{message}, found {found}")

    # -------------------------------------------------------------------------
    # Precedence climbing
    # -------------------------------------------------------------------------

    def _expression(self) -> Expression:
        return self._parse_precedence(Precedence.OR)

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """Parse an expression whose infix operators bind at least `precedence`."""
        expression = self._prefix(self._advance())

        while not self._is_at_end() and precedence <= precedence_of(self._current()):
            expression = self._infix(self._advance(), expression)

        return expression

    def _prefix(self, token: Token) -> Expression:
        if token.type == TokenType.LITERAL:
            return Literal(token.value)

        if token.type == TokenType.IDENTIFIER:
            return Variable(str(token.value))

        if token.type == TokenType.LPAREN:
            return self._grouping()

        if token.type == TokenType.LBRACKET:
            return Array(self._list(TokenType.RBRACKET, "Expected ']' after array elements"))

        if token.type in (TokenType.MINUS, TokenType.NOT):
            return self._unary(token)

        raise ParseError(
            SyntaxErrorKind.UNEXPECTED_TOKEN,
            f"Expected left side of expression, found {token.describe()}",
        )

    def _infix(self, token: Token, left: Expression) -> Expression:
        if token.type in _BINARY_TOKENS:
            return self._binary(token, left)

        if token.type == TokenType.LPAREN:
            return self._call(left)

        raise ParseError(
            SyntaxErrorKind.UNEXPECTED_TOKEN, f"Unexpected token {token.describe()}"
        )

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _grouping(self) -> Expression:
        expression = self._expression()
        self._consume(TokenType.RPAREN, "Expected ')' after group expression")
        return expression

    def _unary(self, token: Token) -> Unary:
        operand = self._parse_precedence(Precedence.UNARY)
        return Unary(Operator.from_token(token.type), operand)

    def _binary(self, token: Token, left: Expression) -> Binary:
        right = self._parse_precedence(precedence_of(token).next())
        return Binary(Operator.from_token(token.type), left, right)

    def _call(self, target: Expression) -> Call:
        if not isinstance(target, Variable):
            raise ParseError(
                SyntaxErrorKind.INVALID_CALL_TARGET,
                "Expression is not a valid call target, expected an identifier",
            )
        params = self._list(TokenType.RPAREN, "Expected ')' after argument list")
        return Call(target.name, params)

    def _list(self, closing: TokenType, message: str) -> list[Expression]:
        """Parse a comma separated expression list up to the closing token."""
        elements: list[Expression] = []

        if self._match(closing):
            self._advance()
            return elements

        elements.append(self._expression())
        while self._match(TokenType.COMMA):
            self._advance()
            elements.append(self._expression())

        self._consume(closing, message)
        return elements


def compile_ast(tokens: list[Token]) -> Expression:
    """Compile a token sequence into an expression tree."""
    return Parser(tokens).parse()


def parse(source: str) -> Expression:
    """Convenience function to tokenize and parse an expression string.

    Args:
        source: The expression string

    Returns:
        The AST root node

    Raises:
        CompileError: LexerError or ParseError on malformed input
    """
    return Parser(Lexer(source).tokenize()).parse()
