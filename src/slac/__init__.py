"""SLAC: a simple logic and arithmetic compiler.

Compiles short textual expressions into a tree, optionally validates and
optimizes the tree against an Environment, and evaluates it to a Value.

This package provides:
- compile: source text to an expression tree
- evaluate / execute: expression tree to a Value
- run: the whole pipeline with defaults from EngineConfig
- StaticEnvironment: case-insensitive registry of variables and functions

Example:
    env = StaticEnvironment({"price": 150})
    extend_environment(env)
    run("max(price, 100) > 149", env)  # Boolean(value=True)
"""

import logging

from slac.ast import Expression
from slac.config import EngineConfig
from slac.environment import Environment, StaticEnvironment
from slac.errors import (
    CompileError,
    EvaluationError,
    LexerError,
    NativeError,
    NativeErrorKind,
    ParseError,
    RuntimeErrorKind,
    SyntaxErrorKind,
)
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.interpreter import Interpreter, evaluate
from slac.lexer import Lexer, tokenize
from slac.optimizer import fold_constants, optimize, transform_ternary
from slac.parser import Parser, compile_ast
from slac.stdlib import builtins, extend_environment
from slac.validator import (
    MissingFunction,
    MissingVariable,
    ParamCountMismatch,
    Valid,
    ValidationResult,
    check_boolean_result,
    validate,
)
from slac.value import Array, Boolean, Number, String, Value

logger = logging.getLogger(__name__)

execute = evaluate


def compile(source: str) -> Expression:
    """Scan and parse source text into an expression tree."""
    return compile_ast(tokenize(source))


def _raise_invalid(result: ValidationResult) -> None:
    if isinstance(result, MissingVariable):
        kind = RuntimeErrorKind.UNDEFINED_VARIABLE
    elif isinstance(result, MissingFunction):
        kind = RuntimeErrorKind.MISSING_FUNCTION
    else:
        kind = RuntimeErrorKind.PARAM_COUNT_MISMATCH
    raise EvaluationError(kind, result.message)


def run(
    source: str,
    environment: Environment | None = None,
    config: EngineConfig | None = None,
) -> Value:
    """Compile, validate, optimize and evaluate in one step.

    Args:
        source: Expression text
        environment: Variables and functions; defaults to the standard library
        config: Pipeline options; defaults to EngineConfig()

    Returns:
        The resulting Value

    Raises:
        CompileError: If the source is not a valid expression
        EvaluationError: If validation is enabled and fails, or evaluation fails
    """
    config = config or EngineConfig()
    if environment is None:
        environment = extend_environment(StaticEnvironment(), config)

    expression = compile(source)

    if config.validate:
        result = validate(environment, expression)
        if not result.is_valid:
            _raise_invalid(result)

    if config.fold_constants:
        expression = optimize(expression, environment)
    elif config.optimize:
        expression = optimize(expression)

    logger.debug("Evaluating %r", source)
    return evaluate(environment, expression)


__all__ = [
    # Pipeline
    "compile",
    "evaluate",
    "execute",
    "run",
    # Configuration
    "EngineConfig",
    # Environment
    "Arity",
    "Environment",
    "FunctionCategory",
    "FunctionDefinition",
    "StaticEnvironment",
    "builtins",
    "extend_environment",
    # Errors
    "CompileError",
    "EvaluationError",
    "LexerError",
    "NativeError",
    "NativeErrorKind",
    "ParseError",
    "RuntimeErrorKind",
    "SyntaxErrorKind",
    # Stages
    "Interpreter",
    "Lexer",
    "Parser",
    "check_boolean_result",
    "fold_constants",
    "optimize",
    "tokenize",
    "transform_ternary",
    "validate",
    # Validation results
    "MissingFunction",
    "MissingVariable",
    "ParamCountMismatch",
    "Valid",
    "ValidationResult",
    # Values
    "Array",
    "Boolean",
    "Number",
    "String",
    "Value",
]
