"""Tests for static validation of expression trees."""

import pytest

from slac.environment import StaticEnvironment
from slac.errors import EvaluationError, RuntimeErrorKind
from slac.functions import Arity
from slac.interpreter import evaluate
from slac.optimizer import optimize
from slac.parser import parse
from slac.stdlib import extend_environment
from slac.validator import (
    VALID,
    MissingFunction,
    MissingVariable,
    ParamCountMismatch,
    Valid,
    check_boolean_result,
    validate,
)


@pytest.fixture
def env():
    return extend_environment(StaticEnvironment({"price": 10, "name": "x"}))


# =============================================================================
# validate
# =============================================================================


class TestValidate:
    """Tests for the validator results."""

    @pytest.mark.parametrize(
        "source",
        [
            "1 + 2",
            "price > 5 and name = 'x'",
            "max(price, 1, 2)",
            "[price, -price, not true]",
            "if_then(price > 5, 'a', 'b')",
        ],
    )
    def test_valid(self, env, source):
        result = validate(env, parse(source))
        assert result == VALID
        assert isinstance(result, Valid)
        assert result.is_valid

    def test_missing_variable(self, env):
        result = validate(env, parse("price + missing"))
        assert result == MissingVariable("missing")
        assert not result.is_valid
        assert "missing" in result.message

    def test_missing_function(self, env):
        assert validate(env, parse("nope(price)")) == MissingFunction("nope")

    def test_param_count_mismatch(self, env):
        result = validate(env, parse("length(1, 2)"))

        assert result == ParamCountMismatch("length", Arity.exact(1), 2)
        assert "expects 1" in result.message

    def test_reports_first_problem_left_to_right(self, env):
        assert validate(env, parse("a + nope(b)")) == MissingVariable("a")
        assert validate(env, parse("nope(a) + b")) == MissingFunction("nope")

    def test_checks_call_parameters(self, env):
        assert validate(env, parse("max(1, missing)")) == MissingVariable("missing")

    def test_ternary_is_checked_as_if_then(self, env):
        tree = optimize(parse("if_then(true, missing, 1)"))
        assert validate(env, tree) == MissingVariable("missing")

    def test_ternary_without_if_then_function(self):
        tree = optimize(parse("if_then(true, 1, 2)"))
        assert validate(StaticEnvironment(), tree) == MissingFunction("if_then")

    def test_same_answer_before_and_after_optimization(self, env):
        tree = parse("if_then(price > 1, name, other)")
        assert validate(env, tree) == validate(env, optimize(tree))

    @pytest.mark.parametrize(
        "source,kind",
        [
            ("missing + 1", RuntimeErrorKind.UNDEFINED_VARIABLE),
            ("nope()", RuntimeErrorKind.MISSING_FUNCTION),
            ("length()", RuntimeErrorKind.PARAM_COUNT_MISMATCH),
        ],
    )
    def test_agrees_with_interpreter(self, env, source, kind):
        tree = parse(source)
        assert not validate(env, tree).is_valid
        with pytest.raises(EvaluationError) as exc_info:
            evaluate(env, tree)
        assert exc_info.value.kind == kind


# =============================================================================
# check_boolean_result
# =============================================================================


class TestCheckBooleanResult:
    """Tests for the boolean result check."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("price > 1", True),
            ("a and b", True),
            ("not a", True),
            ("true", True),
            ("flag", True),
            ("is_valid()", True),
            ("1 + 2", False),
            ("'text'", False),
            ("-price", False),
            ("[true]", False),
        ],
    )
    def test_check_boolean_result(self, source, expected):
        assert check_boolean_result(parse(source)) is expected

    def test_ternary_needs_boolean_branches(self):
        assert check_boolean_result(optimize(parse("if_then(a, b > 1, true)")))
        assert not check_boolean_result(optimize(parse("if_then(a, 1, true)")))
