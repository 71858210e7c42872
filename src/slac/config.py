"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class EngineConfig:
    """Options for the compile / validate / optimize / evaluate pipeline.

    Attributes:
        optimize: Rewrite if_then calls into lazy ternaries before evaluation
        fold_constants: Also evaluate literal-only subtrees ahead of time
        validate: Check variables and functions before evaluation
        zero_based_strings: String positions in the standard library start at 0
    """

    optimize: bool = True
    fold_constants: bool = False
    validate: bool = False
    zero_based_strings: bool = False

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables.

        Reads SLAC_OPTIMIZE, SLAC_FOLD_CONSTANTS, SLAC_VALIDATE and
        SLAC_ZERO_BASED_STRINGS. Unset variables keep the defaults.
        """
        defaults = cls()
        return cls(
            optimize=_flag("SLAC_OPTIMIZE", defaults.optimize),
            fold_constants=_flag("SLAC_FOLD_CONSTANTS", defaults.fold_constants),
            validate=_flag("SLAC_VALIDATE", defaults.validate),
            zero_based_strings=_flag("SLAC_ZERO_BASED_STRINGS", defaults.zero_based_strings),
        )

    @property
    def string_offset(self) -> int:
        """Offset between user-facing string positions and Python indexes."""
        return 0 if self.zero_based_strings else 1
