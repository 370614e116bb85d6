"""Parse result types threaded from the parser to the code generator."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class ClauseKind(enum.StrEnum):
    """How a ``for`` clause iterates."""

    ARRAY = "array"
    NUMERIC = "numeric"
    ITERATOR = "iterator"


@dataclass(frozen=True)
class ForClause:
    """A single ``for`` clause.

    ``range_exprs`` is ``None`` for array clauses, which iterate an implicit
    positional input by index.
    """

    names: tuple[str, ...]
    kind: ClauseKind = ClauseKind.ARRAY
    range_exprs: tuple[str, ...] | None = None

    @property
    def has_implicit_input(self) -> bool:
        return self.kind is ClauseKind.ARRAY


@dataclass(frozen=True)
class Comprehension:
    """Structural parts of a comprehension expression.

    Equivalent to the set-builder notation
    ``op_name { out | names in range_exprs, predicates }``.
    """

    out: str
    for_clauses: tuple[ForClause, ...]
    predicates: tuple[str, ...] = field(default_factory=tuple)
    op_name: str = "list"
    max_param: int = 0

    @property
    def implicit_inputs(self) -> list[int]:
        """1-based indexes of clauses that consume an implicit input."""
        return [
            i for i, clause in enumerate(self.for_clauses, start=1)
            if clause.has_implicit_input
        ]
