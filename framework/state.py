"""State conventions for immutable, serializable game states."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Self

from .serialize import digest, to_serializable


@dataclass(frozen=True)
class State:
    """Base immutable state object.

    States are values: operations never mutate one in place, they `evolve` a
    copy and hand the new value back to the caller.
    """

    def evolve(self, **changes: Any) -> Self:
        """Return a copy with `changes` applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return to_serializable(self)

    def state_digest(self) -> str:
        """Return a deterministic digest for event logs."""
        return digest(self.to_dict())
