"""Environments provide variables and native functions to expressions.

The engine only depends on the Environment protocol: two case-insensitive
lookups that never mutate anything. StaticEnvironment is the concrete
registry used by the standard library, the CLI and the tests.
"""

import logging
from typing import Any, Iterable, Mapping, Protocol

from slac.functions import Arity, FunctionCategory, FunctionDefinition, NativeFunction
from slac.value import Value

logger = logging.getLogger(__name__)


class Environment(Protocol):
    """Lookup contract consulted by the validator and the interpreter."""

    def variable(self, name: str) -> Value | None:
        """Return the variable's Value, or None if it does not exist."""
        ...

    def function(self, name: str) -> FunctionDefinition | None:
        """Return the function definition, or None if it does not exist."""
        ...


class StaticEnvironment:
    """An Environment whose variables and functions are known ahead of execution.

    All names are treated case-insensitively and the last registration wins.

    Example:
        env = StaticEnvironment()
        env.add_variable("price", 10)
        env.add_native("double", lambda v: Number(v.value * 2), Arity.exact(1))
        result = execute(env, compile("double(price) > 15"))
    """

    def __init__(
        self,
        variables: Mapping[str, Any] | None = None,
        functions: Iterable[FunctionDefinition] = (),
    ):
        self._variables: dict[str, Value] = {}
        self._functions: dict[str, FunctionDefinition] = {}
        if variables:
            self.add_variables(variables)
        self.add_functions(functions)

    # -------------------------------------------------------------------------
    # Environment protocol
    # -------------------------------------------------------------------------

    def variable(self, name: str) -> Value | None:
        return self._variables.get(name.lower())

    def function(self, name: str) -> FunctionDefinition | None:
        return self._functions.get(name.lower())

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    def add_variable(self, name: str, value: Any) -> None:
        """Add or replace a variable. Plain Python values are converted."""
        self._variables[name.lower()] = Value.from_python(value)

    def add_variables(self, variables: Mapping[str, Any]) -> None:
        for name, value in variables.items():
            self.add_variable(name, value)

    def remove_variable(self, name: str) -> None:
        self._variables.pop(name.lower(), None)

    def clear_variables(self) -> None:
        self._variables.clear()

    def list_variables(self) -> list[str]:
        return sorted(self._variables)

    # -------------------------------------------------------------------------
    # Functions
    # -------------------------------------------------------------------------

    def add_function(self, definition: FunctionDefinition) -> None:
        """Add or replace a function definition."""
        key = definition.name.lower()
        if key in self._functions:
            logger.debug("Replacing function '%s'", definition.name)
        self._functions[key] = definition

    def add_functions(self, definitions: Iterable[FunctionDefinition]) -> None:
        for definition in definitions:
            self.add_function(definition)

    def add_native(
        self,
        name: str,
        implementation: NativeFunction,
        arity: Arity,
        pure: bool = True,
    ) -> None:
        """Register a bare callable without documentation metadata."""
        self.add_function(
            FunctionDefinition(
                name=name, arity=arity, implementation=implementation, pure=pure
            )
        )

    def remove_function(self, name: str) -> None:
        self._functions.pop(name.lower(), None)

    def list_functions(
        self, category: FunctionCategory | None = None
    ) -> list[FunctionDefinition]:
        """List registered functions sorted by name, optionally by category."""
        functions = sorted(self._functions.values(), key=lambda f: f.name)
        if category is None:
            return functions
        return [f for f in functions if f.category == category]

    def export_documentation(self) -> dict[str, Any]:
        """Export all function definitions organized by category."""
        by_category: dict[str, list[dict[str, Any]]] = {}
        for definition in self.list_functions():
            by_category.setdefault(definition.category.value, []).append(
                definition.to_dict()
            )
        return {
            "functions": {f.name: f.to_dict() for f in self.list_functions()},
            "byCategory": by_category,
        }
