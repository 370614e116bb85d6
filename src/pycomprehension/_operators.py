"""Fold operator registry.

Each operator provides an initializer expression for the accumulator and an
accumulate template whose ``{out}`` slot receives the output expression list.
"""

from __future__ import annotations

from dataclasses import dataclass

from pycomprehension._constants import KEY_VAR, RESULT_VAR, VALUE_VAR


@dataclass(frozen=True)
class FoldOperator:
    """Initializer and per-iteration accumulate statements for a fold."""

    name: str
    init: str
    accumulate: tuple[str, ...]

    def render(self, out: str) -> list[str]:
        return [line.format(out=out) for line in self.accumulate]


def _extremum(name: str, comparison: str) -> FoldOperator:
    return FoldOperator(
        name=name,
        init="None",
        accumulate=(
            f"{VALUE_VAR} = ({{out}})",
            f"if {RESULT_VAR} is None or {VALUE_VAR} {comparison} {RESULT_VAR}:",
            f"    {RESULT_VAR} = {VALUE_VAR}",
        ),
    )


FOLD_OPERATORS: dict[str, FoldOperator] = {
    "list": FoldOperator(
        name="list",
        init="[]",
        accumulate=(f"{RESULT_VAR}.append(({{out}}))",),
    ),
    "table": FoldOperator(
        name="table",
        init="{}",
        accumulate=(
            f"{KEY_VAR}, {VALUE_VAR} = ({{out}})",
            f"{RESULT_VAR}[{KEY_VAR}] = {VALUE_VAR}",
        ),
    ),
    "sum": FoldOperator(
        name="sum",
        init="0",
        accumulate=(f"{RESULT_VAR} = {RESULT_VAR} + ({{out}})",),
    ),
    "min": _extremum("min", "<"),
    "max": _extremum("max", ">"),
}
