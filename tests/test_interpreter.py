"""Tests for the SLAC interpreter."""

import math

import pytest

from slac.ast import Binary, Call, Literal, Operator, Ternary, Unary, Variable
from slac.environment import StaticEnvironment
from slac.errors import EvaluationError, NativeError, RuntimeErrorKind
from slac.functions import Arity
from slac.interpreter import Interpreter, evaluate
from slac.optimizer import optimize
from slac.parser import parse
from slac.stdlib import extend_environment
from slac.value import Array, Boolean, Number, String


@pytest.fixture
def env():
    environment = StaticEnvironment(
        {
            "price": 150,
            "name": "Widget",
            "active": True,
            "tags": ["a", "b"],
            "empty_text": "",
        }
    )
    return extend_environment(environment)


def run(env, source):
    return evaluate(env, parse(source))


# =============================================================================
# Arithmetic and comparison
# =============================================================================


class TestArithmetic:
    """Tests for arithmetic evaluation."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("1 + 2 * 3", Number(7)),
            ("(1 + 2) * 3", Number(9)),
            ("10 - 4 - 3", Number(3)),
            ("7 / 2", Number(3.5)),
            ("5 div 2", Number(2)),
            ("5 mod 2", Number(1)),
            ("-5 div 2", Number(-2)),
            ("-price", Number(-150)),
            ("'abc' + 'def'", String("abcdef")),
            ("[10, 20] + [30, 40]", Array((Number(10), Number(20), Number(30), Number(40)))),
        ],
    )
    def test_arithmetic(self, env, source, expected):
        assert run(env, source) == expected

    def test_division_by_zero(self, env):
        assert run(env, "1 / 0") == Number(math.inf)
        assert math.isnan(run(env, "0 / 0").value)

    @pytest.mark.parametrize("source", ["1 + 'x'", "1 - 'x'", "1 mod 'x'", "'a' * 2", "-'a'"])
    def test_type_mismatch(self, env, source):
        with pytest.raises(EvaluationError) as exc_info:
            run(env, source)
        assert exc_info.value.kind == RuntimeErrorKind.TYPE_MISMATCH


class TestComparison:
    """Tests for comparison and equality."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("50 * 3 > 149", True),
            ("price >= 150", True),
            ("price < 150", False),
            ("'a' < 'b'", True),
            ("1 = 1", True),
            ("1 <> 2", True),
            ("'1' = 1", False),
            ("[1, 2] = [1, 2]", True),
            ("1 < 'a'", False),
            ("1 > 'a'", False),
            ("NAME = 'Widget'", True),
        ],
    )
    def test_comparison(self, env, source, expected):
        assert run(env, source) == Boolean(expected)

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("0 / 0 = 0 / 0", False),
            ("0 / 0 <> 0 / 0", True),
            ("[0 / 0] = [0 / 0]", False),
        ],
    )
    def test_nan_never_equals(self, env, source, expected):
        assert run(env, source) == Boolean(expected)

    def test_nan_variables_never_equal(self):
        env = StaticEnvironment({"a": math.nan, "b": float("nan")})
        assert run(env, "a = b") == Boolean(False)
        assert run(env, "a = a") == Boolean(False)


# =============================================================================
# Logic
# =============================================================================


class TestLogic:
    """Tests for boolean operators and short-circuiting."""

    @pytest.fixture
    def strict_env(self, env):
        def fail(*args):
            pytest.fail("right operand must not be evaluated")

        env.add_native("fail", fail, Arity.any())
        return env

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("true and false", False),
            ("true or false", True),
            ("true xor true", False),
            ("true xor false", True),
            ("not active", False),
            ("not (price > 200)", True),
            ("price > 100 and name = 'Widget'", True),
        ],
    )
    def test_logic(self, env, source, expected):
        assert run(env, source) == Boolean(expected)

    def test_and_short_circuits(self, strict_env):
        assert run(strict_env, "false and fail()") == Boolean(False)

    def test_or_short_circuits(self, strict_env):
        assert run(strict_env, "true or fail()") == Boolean(True)

    @pytest.mark.parametrize(
        "source", ["1 and true", "true and 1", "false or 'x'", "not 1", "1 xor true"]
    )
    def test_logic_requires_booleans(self, env, source):
        with pytest.raises(EvaluationError) as exc_info:
            run(env, source)
        assert exc_info.value.kind == RuntimeErrorKind.TYPE_MISMATCH


# =============================================================================
# Variables
# =============================================================================


class TestVariables:
    """Tests for variable resolution."""

    def test_variables_are_case_insensitive(self, env):
        assert run(env, "PRICE") == Number(150)

    def test_undefined_variable_raises(self, env):
        with pytest.raises(EvaluationError) as exc_info:
            run(env, "does_not_exist + 1")
        assert exc_info.value.kind == RuntimeErrorKind.UNDEFINED_VARIABLE
        assert "does_not_exist" in str(exc_info.value)

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("does_not_exist = ''", True),
            ("does_not_exist = 0", True),
            ("does_not_exist = []", True),
            ("does_not_exist = missing_too", True),
            ("does_not_exist = 'x'", False),
            ("does_not_exist = false", False),
            ("does_not_exist <> ''", False),
            ("'' = does_not_exist", True),
        ],
    )
    def test_undefined_equals_empty(self, env, source, expected):
        assert run(env, source) == Boolean(expected)

    def test_false_is_not_empty(self, env):
        assert run(env, "does_not_exist = false") == Boolean(False)
        assert run(env, "does_not_exist <> false") == Boolean(True)

    def test_array_with_variables(self, env):
        assert run(env, "[price, name]") == Array((Number(150), String("Widget")))


# =============================================================================
# Calls and ternaries
# =============================================================================


class TestCalls:
    """Tests for native function calls."""

    def test_call_builtin(self, env):
        assert run(env, "max(price, 200)") == Number(200)

    def test_function_names_are_case_insensitive(self, env):
        assert run(env, "MAX(1, 2)") == Number(2)

    def test_missing_function(self, env):
        with pytest.raises(EvaluationError) as exc_info:
            run(env, "nope(1)")
        assert exc_info.value.kind == RuntimeErrorKind.MISSING_FUNCTION

    def test_param_count_mismatch(self, env):
        with pytest.raises(EvaluationError) as exc_info:
            run(env, "length(1, 2)")
        assert exc_info.value.kind == RuntimeErrorKind.PARAM_COUNT_MISMATCH

    def test_native_error_is_wrapped(self, env):
        with pytest.raises(EvaluationError) as exc_info:
            run(env, "at('abc', 10)")
        assert exc_info.value.kind == RuntimeErrorKind.NATIVE_FUNCTION_ERROR
        assert isinstance(exc_info.value.__cause__, NativeError)
        assert str(exc_info.value).startswith("Error calling at:")

    def test_plain_python_results_are_converted(self, env):
        env.add_native("answer", lambda: 42, Arity.none())
        assert run(env, "answer()") == Number(42)

    def test_params_evaluated_eagerly(self, env):
        calls = []

        def track(value):
            calls.append(value)
            return value

        env.add_native("track", track, Arity.exact(1))
        result = run(env, "if_then(true, track(1), track(2))")

        assert result == Number(1)
        assert calls == [Number(1), Number(2)]


class TestTernary:
    """Tests for the lazy conditional."""

    def test_only_selected_branch_is_evaluated(self, env):
        calls = []

        def track(value):
            calls.append(value)
            return value

        env.add_native("track", track, Arity.exact(1))
        tree = optimize(parse("if_then(price > 100, track(1), track(2))"))

        assert evaluate(env, tree) == Number(1)
        assert calls == [Number(1)]

    def test_ternary_node(self, env):
        node = Ternary(
            Operator.TERNARY_CONDITION,
            Binary(Operator.LESS, Variable("price"), Literal(Number(10))),
            Literal(String("cheap")),
            Literal(String("expensive")),
        )
        assert Interpreter(env).evaluate(node) == String("expensive")

    def test_ternary_condition_must_be_boolean(self, env):
        node = Ternary(
            Operator.TERNARY_CONDITION,
            Literal(Number(1)),
            Literal(Number(2)),
            Literal(Number(3)),
        )
        with pytest.raises(EvaluationError) as exc_info:
            evaluate(env, node)
        assert exc_info.value.kind == RuntimeErrorKind.TYPE_MISMATCH

    def test_unknown_ternary_operator(self, env):
        node = Ternary(
            Operator.PLUS,
            Literal(Boolean(True)),
            Literal(Number(2)),
            Literal(Number(3)),
        )
        with pytest.raises(EvaluationError):
            evaluate(env, node)

    def test_call_node_with_no_params(self, env):
        assert evaluate(env, Call("pi")) == Number(math.pi)

    def test_evaluation_is_repeatable(self, env):
        tree = parse("price * 2")
        assert evaluate(env, tree) == evaluate(env, tree) == Number(300)


# =============================================================================
# Limits
# =============================================================================


class TestLimits:
    """Tests for trees deeper than the Python stack."""

    def test_deep_tree_raises_evaluation_error(self, env):
        node = Literal(Number(1))
        for _ in range(20000):
            node = Unary(Operator.MINUS, node)

        with pytest.raises(EvaluationError) as exc_info:
            evaluate(env, node)
        assert exc_info.value.kind == RuntimeErrorKind.NESTING_TOO_DEEP
