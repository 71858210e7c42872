"""Tests for environments and function declarations."""

import logging

import pytest

from slac.environment import Environment, StaticEnvironment
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.value import Array, Boolean, Number, String


def _double(value):
    return Number(value.value * 2)


# =============================================================================
# Arity
# =============================================================================


class TestArity:
    """Tests for accepted parameter counts."""

    def test_exact(self):
        arity = Arity.exact(2)
        assert arity.accepts(2)
        assert not arity.accepts(1)
        assert not arity.accepts(3)
        assert str(arity) == "2"

    def test_with_optional(self):
        arity = Arity.with_optional(1, 2)
        assert [arity.accepts(n) for n in range(5)] == [False, True, True, True, False]
        assert arity.maximum == 3
        assert str(arity) == "1 to 3"

    def test_any(self):
        arity = Arity.any()
        assert arity.accepts(0)
        assert arity.accepts(100)
        assert arity.maximum is None

    def test_none(self):
        assert Arity.none().accepts(0)
        assert not Arity.none().accepts(1)


# =============================================================================
# FunctionDefinition
# =============================================================================


class TestFunctionDefinition:
    """Tests for declared functions."""

    def test_declare_parses_name_and_params(self):
        definition = FunctionDefinition.declare(
            "double(value: Number): Number", _double, Arity.exact(1)
        )
        assert definition.name == "double"
        assert definition.params == "(value: Number): Number"
        assert definition.signature == "double(value: Number): Number"

    def test_declare_without_params(self):
        definition = FunctionDefinition.declare("answer", lambda: Number(42), Arity.none())
        assert definition.name == "answer"
        assert definition.params == ""

    def test_to_dict(self):
        definition = FunctionDefinition.declare(
            "double(value: Number): Number",
            _double,
            Arity.exact(1),
            description="Doubles a number",
            category=FunctionCategory.MATH,
            examples=["double(2) = 4"],
        )
        assert definition.to_dict() == {
            "name": "double",
            "signature": "double(value: Number): Number",
            "description": "Doubles a number",
            "category": "math",
            "arity": {"required": 1, "optional": 0, "variadic": False},
            "pure": True,
            "examples": ["double(2) = 4"],
        }


# =============================================================================
# StaticEnvironment
# =============================================================================


class TestStaticEnvironment:
    """Tests for the static variable and function registry."""

    def test_satisfies_protocol(self):
        environment: Environment = StaticEnvironment()
        assert environment.variable("x") is None
        assert environment.function("f") is None

    def test_variables_are_converted(self):
        environment = StaticEnvironment({"n": 1, "s": "a", "b": False, "l": [1, "x"]})

        assert environment.variable("n") == Number(1)
        assert environment.variable("s") == String("a")
        assert environment.variable("b") == Boolean(False)
        assert environment.variable("l") == Array((Number(1), String("x")))

    def test_lookup_is_case_insensitive(self):
        environment = StaticEnvironment({"Price": 10})
        assert environment.variable("PRICE") == Number(10)
        assert environment.variable("price") == Number(10)

    def test_last_registration_wins(self):
        environment = StaticEnvironment()
        environment.add_variable("x", 1)
        environment.add_variable("X", 2)
        assert environment.variable("x") == Number(2)
        assert environment.list_variables() == ["x"]

    def test_remove_and_clear_variables(self):
        environment = StaticEnvironment({"a": 1, "b": 2})
        environment.remove_variable("A")
        assert environment.list_variables() == ["b"]
        environment.remove_variable("missing")
        environment.clear_variables()
        assert environment.list_variables() == []

    def test_rejects_unsupported_values(self):
        with pytest.raises(TypeError):
            StaticEnvironment({"x": None})

    def test_add_native(self):
        environment = StaticEnvironment()
        environment.add_native("Double", _double, Arity.exact(1), pure=False)

        definition = environment.function("double")
        assert definition.name == "Double"
        assert definition.pure is False
        assert definition.category == FunctionCategory.CUSTOM

    def test_replacing_function_is_logged(self, caplog):
        environment = StaticEnvironment()
        environment.add_native("f", _double, Arity.exact(1))

        with caplog.at_level(logging.DEBUG, logger="slac.environment"):
            environment.add_native("F", _double, Arity.exact(1))

        assert "Replacing function 'F'" in caplog.text

    def test_remove_function(self):
        environment = StaticEnvironment()
        environment.add_native("f", _double, Arity.exact(1))
        environment.remove_function("F")
        assert environment.function("f") is None

    def test_list_functions_by_category(self):
        environment = StaticEnvironment(
            functions=[
                FunctionDefinition.declare("b()", _double, Arity.none(), category=FunctionCategory.MATH),
                FunctionDefinition.declare("a()", _double, Arity.none(), category=FunctionCategory.MATH),
                FunctionDefinition.declare("c()", _double, Arity.none()),
            ]
        )

        assert [f.name for f in environment.list_functions()] == ["a", "b", "c"]
        assert [f.name for f in environment.list_functions(FunctionCategory.MATH)] == ["a", "b"]

    def test_export_documentation(self):
        environment = StaticEnvironment()
        environment.add_function(
            FunctionDefinition.declare(
                "double(value: Number): Number",
                _double,
                Arity.exact(1),
                category=FunctionCategory.MATH,
            )
        )

        docs = environment.export_documentation()

        assert set(docs["functions"]) == {"double"}
        assert docs["byCategory"]["math"][0]["name"] == "double"
