"""Tests for the SLAC optimizer."""

import pytest

from slac.ast import Array, Binary, Call, Literal, Operator, Ternary, Unary, Variable
from slac.environment import StaticEnvironment
from slac.interpreter import evaluate
from slac.optimizer import ConstantFolder, fold_constants, optimize, transform_ternary
from slac.parser import parse
from slac.stdlib import extend_environment
from slac.value import Array as ArrayValue
from slac.value import Boolean, Number, String


@pytest.fixture
def env():
    return extend_environment(StaticEnvironment({"x": 5}))


def num(value):
    return Literal(Number(value))


# =============================================================================
# Ternary rewrite
# =============================================================================


class TestTransformTernary:
    """Tests for rewriting if_then calls."""

    def test_three_param_call_becomes_ternary(self):
        tree = transform_ternary(parse("if_then(x > 1, 'a', 'b')"))

        assert tree == Ternary(
            Operator.TERNARY_CONDITION,
            Binary(Operator.GREATER, Variable("x"), num(1)),
            Literal(String("a")),
            Literal(String("b")),
        )

    def test_name_is_case_insensitive(self):
        assert isinstance(transform_ternary(parse("IF_THEN(true, 1, 2)")), Ternary)

    def test_two_param_call_is_kept(self):
        tree = parse("if_then(true, 1)")
        assert transform_ternary(tree) == tree

    def test_other_calls_are_kept(self):
        tree = parse("max(1, 2, 3)")
        assert transform_ternary(tree) == tree

    @pytest.mark.parametrize(
        "source,path",
        [
            ("1 + if_then(true, 1, 2)", lambda t: t.right),
            ("-if_then(true, 1, 2)", lambda t: t.operand),
            ("[if_then(true, 1, 2)]", lambda t: t.elements[0]),
            ("max(if_then(true, 1, 2), 0)", lambda t: t.params[0]),
        ],
    )
    def test_nested_calls_are_rewritten(self, source, path):
        assert isinstance(path(transform_ternary(parse(source))), Ternary)

    def test_rewrite_inside_branches(self):
        tree = transform_ternary(parse("if_then(true, if_then(false, 1, 2), 3)"))
        assert isinstance(tree.then_branch, Ternary)

    def test_input_is_not_mutated(self):
        tree = parse("if_then(true, 1, 2)")
        transform_ternary(tree)
        assert isinstance(tree, Call)

    def test_optimize_without_environment(self):
        assert isinstance(optimize(parse("if_then(true, 1, 2)")), Ternary)


# =============================================================================
# Constant folding
# =============================================================================


class TestConstantFolding:
    """Tests for evaluating literal-only subtrees."""

    def test_fold_arithmetic(self, env):
        assert fold_constants(env, parse("1 + 2 * 3")) == num(7)

    def test_fold_keeps_variables(self, env):
        assert fold_constants(env, parse("x + 2 * 3")) == Binary(
            Operator.PLUS, Variable("x"), num(6)
        )

    def test_fold_unary(self, env):
        assert fold_constants(env, parse("not true")) == Literal(Boolean(False))

    def test_fold_array(self, env):
        assert fold_constants(env, parse("[1, 1 + 1]")) == Literal(
            ArrayValue((Number(1), Number(2)))
        )

    def test_array_with_variable_is_kept(self, env):
        assert fold_constants(env, parse("[x, 1 + 1]")) == Array((Variable("x"), num(2)))

    def test_fold_pure_call(self, env):
        assert fold_constants(env, parse("max(1, 5, 3)")) == num(5)

    def test_impure_call_is_kept(self, env):
        tree = parse("random()")
        assert fold_constants(env, tree) == tree

    def test_unknown_call_is_kept(self, env):
        tree = parse("unknown(1)")
        assert fold_constants(env, tree) == tree

    def test_failing_subtree_is_kept(self, env):
        tree = parse("1 + 'x'")
        assert fold_constants(env, tree) == tree

    def test_fold_ternary_with_literal_condition(self, env):
        tree = transform_ternary(parse("if_then(1 < 2, x, 0)"))
        assert fold_constants(env, tree) == Variable("x")

    def test_changed_flag(self, env):
        folder = ConstantFolder(env)
        folder.fold(parse("x"))
        assert folder.changed is False
        folder.fold(parse("1 + 1"))
        assert folder.changed is True

    def test_optimize_with_environment_reaches_fixed_point(self, env):
        tree = optimize(parse("if_then(1 > 0, if_then(false, 1, 2) * x, 0)"), env)
        assert tree == Binary(Operator.MULTIPLY, num(2), Variable("x"))

    @pytest.mark.parametrize(
        "source",
        [
            "if_then(x > 3, 'big', 'small')",
            "x * (2 + 3) - length('abc')",
            "[x, 1 + 1] + [3]",
            "not (x = 5) or 1 < 2",
        ],
    )
    def test_optimized_tree_evaluates_the_same(self, env, source):
        tree = parse(source)
        assert evaluate(env, optimize(tree, env)) == evaluate(env, tree)

    def test_folded_unary_minus(self, env):
        assert optimize(Unary(Operator.MINUS, num(3)), env) == num(-3)
