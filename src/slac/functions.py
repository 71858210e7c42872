"""Native function declarations for the SLAC expression language.

Functions are callable from expressions (e.g., `max(a, b) > 10`, `now()`).
Each function is declared with its arity and metadata for documentation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from slac.value import Value

NativeFunction = Callable[..., Value]


class FunctionCategory(Enum):
    """Categories for organizing functions in documentation."""

    COMMON = "common"
    MATH = "math"
    STRING = "string"
    REGEX = "regex"
    TIME = "time"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Arity:
    """The accepted parameter counts of a function.

    Attributes:
        required: Number of parameters that must be supplied
        optional: Number of additional parameters that may be supplied
        variadic: If True, any number of parameters is accepted
    """

    required: int = 0
    optional: int = 0
    variadic: bool = False

    @classmethod
    def exact(cls, count: int) -> "Arity":
        return cls(required=count)

    @classmethod
    def with_optional(cls, required: int, optional: int) -> "Arity":
        return cls(required=required, optional=optional)

    @classmethod
    def any(cls) -> "Arity":
        return cls(variadic=True)

    @classmethod
    def none(cls) -> "Arity":
        return cls()

    @property
    def maximum(self) -> int | None:
        if self.variadic:
            return None
        return self.required + self.optional

    def accepts(self, count: int) -> bool:
        """Check whether a call with `count` parameters is allowed."""
        if self.variadic:
            return True
        return self.required <= count <= self.required + self.optional

    def __str__(self) -> str:
        if self.variadic:
            return "any number of"
        if self.optional:
            return f"{self.required} to {self.required + self.optional}"
        return str(self.required)


@dataclass
class FunctionDefinition:
    """Complete definition of an expression function.

    Attributes:
        name: Function name as used in expressions
        arity: Accepted parameter counts
        implementation: Python callable taking positional Values, returning a Value
        params: Parameter signature for documentation, e.g. "(left: Number, right: Number): Number"
        description: Human-readable description
        category: Category for documentation organization
        pure: Pure functions may be evaluated ahead of time by the optimizer
        examples: Example expressions using this function
    """

    name: str
    arity: Arity
    implementation: NativeFunction
    params: str = ""
    description: str = ""
    category: FunctionCategory = FunctionCategory.CUSTOM
    pure: bool = True
    examples: list[str] = field(default_factory=list)

    @classmethod
    def declare(
        cls,
        declaration: str,
        implementation: NativeFunction,
        arity: Arity,
        **kwargs: Any,
    ) -> "FunctionDefinition":
        """Create a definition from a declaration like "max(left: Number, right: Number): Number".

        If the declaration has no opening parenthesis, the whole string is used
        as the name and the params are left empty.
        """
        name, paren, rest = declaration.partition("(")
        params = f"({rest}" if paren else ""
        return cls(
            name=name.strip(),
            arity=arity,
            implementation=implementation,
            params=params,
            **kwargs,
        )

    @property
    def signature(self) -> str:
        return f"{self.name}{self.params}"

    def to_dict(self) -> dict[str, Any]:
        """Export for documentation."""
        return {
            "name": self.name,
            "signature": self.signature,
            "description": self.description,
            "category": self.category.value,
            "arity": {
                "required": self.arity.required,
                "optional": self.arity.optional,
                "variadic": self.arity.variadic,
            },
            "pure": self.pure,
            "examples": self.examples,
        }
