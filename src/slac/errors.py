"""Error types for the SLAC expression engine.

Two disjoint families are raised by the engine:
- CompileError: raised by the lexer and parser, always fatal to compilation
- EvaluationError: raised by the interpreter, aborts the whole evaluation

NativeError is raised by native functions and wrapped into an
EvaluationError at the call boundary.
"""

from enum import Enum


class SyntaxErrorKind(Enum):
    """Kinds of compile-time errors."""

    INVALID_CHARACTER = "invalid_character"
    INVALID_NUMBER = "invalid_number"
    UNTERMINATED_STRING_LITERAL = "unterminated_string_literal"
    NO_VALID_TOKENS = "no_valid_tokens"
    UNEXPECTED_TOKEN = "unexpected_token"
    EXPECTED_TOKEN = "expected_token"
    UNEXPECTED_END = "unexpected_end"
    MULTIPLE_EXPRESSIONS = "multiple_expressions"
    INVALID_CALL_TARGET = "invalid_call_target"
    NESTING_TOO_DEEP = "nesting_too_deep"


class RuntimeErrorKind(Enum):
    """Kinds of evaluation errors."""

    MISSING_FUNCTION = "missing_function"
    PARAM_COUNT_MISMATCH = "param_count_mismatch"
    TYPE_MISMATCH = "type_mismatch"
    UNDEFINED_VARIABLE = "undefined_variable"
    NATIVE_FUNCTION_ERROR = "native_function_error"
    NESTING_TOO_DEEP = "nesting_too_deep"


class NativeErrorKind(Enum):
    """Kinds of errors reported by native functions."""

    WRONG_PARAMETER_COUNT = "wrong_parameter_count"
    WRONG_PARAMETER_TYPE = "wrong_parameter_type"
    INDEX_OUT_OF_BOUNDS = "index_out_of_bounds"
    INDEX_NEGATIVE = "index_negative"
    CUSTOM = "custom"


class CompileError(Exception):
    """Error while turning source text into an expression tree."""

    def __init__(self, kind: SyntaxErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"Syntax error: {message}")


class LexerError(CompileError):
    """Error during lexical analysis."""

    def __init__(self, kind: SyntaxErrorKind, message: str, position: int):
        self.position = position
        super().__init__(kind, f"{message} at position {position}")


class ParseError(CompileError):
    """Error during parsing."""


class EvaluationError(Exception):
    """Error during expression evaluation."""

    def __init__(self, kind: RuntimeErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


class NativeError(Exception):
    """Error raised from inside a native function.

    Example:
        raise NativeError.wrong_type()
        raise NativeError("values not comparable")
    """

    def __init__(self, message: str, kind: NativeErrorKind = NativeErrorKind.CUSTOM):
        self.kind = kind
        self.message = message
        super().__init__(message)

    @classmethod
    def wrong_count(cls, expected: int) -> "NativeError":
        return cls(
            f'not enough parameters: "{expected}" expected',
            NativeErrorKind.WRONG_PARAMETER_COUNT,
        )

    @classmethod
    def wrong_type(cls) -> "NativeError":
        return cls("wrong parameter type", NativeErrorKind.WRONG_PARAMETER_TYPE)

    @classmethod
    def out_of_bounds(cls, index: int) -> "NativeError":
        return cls(
            f'index "{index}" is out of bounds', NativeErrorKind.INDEX_OUT_OF_BOUNDS
        )

    @classmethod
    def negative_index(cls) -> "NativeError":
        return cls("index must not be negative", NativeErrorKind.INDEX_NEGATIVE)
