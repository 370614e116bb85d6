"""Code generator: turns a parsed Comprehension into a procedure body.

The body is built inside out. The accumulate statement is wrapped first in
the predicate guards and then in the loops, each in reverse source order, so
the first ``for`` clause ends up as the outermost loop and every predicate
guards the accumulate statement at the innermost level.

For ``sum(x**2 for x if x % 2 == 0)`` the body is::

    __result = 0
    for __idx1 in __range(__len(__in1)):
        x = __in1[__idx1]
        if (x % 2 == 0):
            __result = __result + (x**2)
"""

from __future__ import annotations

from io import StringIO

from pycomprehension._constants import (
    CHECK_STEP_NAME,
    COUNTER_PREFIX,
    INDENT,
    INDEX_PREFIX,
    INPUT_PREFIX,
    LEN_NAME,
    RANGE_NAME,
    RESULT_VAR,
    STEP_PREFIX,
    STOP_PREFIX,
)
from pycomprehension._operators import FOLD_OPERATORS
from pycomprehension._types import ClauseKind, Comprehension, ForClause


def input_name(clause_index: int) -> str:
    """Parameter name of the implicit input consumed by an array clause."""
    return f"{INPUT_PREFIX}{clause_index}"


def _wrap(header: list[str], body: list[str]) -> list[str]:
    return header + [INDENT + line for line in body]


def _loop(clause: ForClause, index: int, body: list[str]) -> list[str]:
    """Wrap ``body`` in the loop for the clause at 1-based ``index``."""
    if clause.kind is ClauseKind.ARRAY:
        source = input_name(index)
        idx = f"{INDEX_PREFIX}{index}"
        return _wrap(
            [f"for {idx} in {RANGE_NAME}({LEN_NAME}({source})):"],
            [f"{clause.names[0]} = {source}[{idx}]"] + body,
        )

    exprs = clause.range_exprs or ()
    if clause.kind is ClauseKind.NUMERIC:
        # Bounds and step are evaluated once, in order; the stop is inclusive.
        counter = f"{COUNTER_PREFIX}{index}"
        stop = f"{STOP_PREFIX}{index}"
        header = [f"{counter} = ({exprs[0]})", f"{stop} = ({exprs[1]})"]
        if len(exprs) == 2:
            step = "1"
            condition = f"{counter} <= {stop}"
        else:
            step = f"{STEP_PREFIX}{index}"
            header.append(f"{step} = {CHECK_STEP_NAME}(({exprs[2]}))")
            condition = f"({counter} <= {stop} if {step} > 0 else {counter} >= {stop})"
        return header + _wrap(
            [f"while {condition}:"],
            [f"{clause.names[0]} = {counter}"] + body + [f"{counter} = {counter} + {step}"],
        )

    targets = ", ".join(clause.names)
    if len(exprs) == 1:
        return _wrap([f"for {targets} in ({exprs[0]}):"], body)
    return _wrap([f"for {targets} in ({', '.join(exprs)}):"], body)


def generate_lines(comp: Comprehension) -> list[str]:
    """Generate the procedure body as a list of unindented source lines."""
    op = FOLD_OPERATORS[comp.op_name]
    code = op.render(comp.out)

    for pred in reversed(comp.predicates):
        code = _wrap([f"if ({pred}):"], code)

    for index in range(len(comp.for_clauses), 0, -1):
        code = _loop(comp.for_clauses[index - 1], index, code)

    return [f"{RESULT_VAR} = {op.init}"] + code


def generate(comp: Comprehension) -> str:
    """Generate the procedure body source for a parsed comprehension.

    Args:
        comp: Output of :func:`~pycomprehension.parse`.

    Returns:
        Python statements that leave the fold result in ``__result``.
    """
    w = StringIO()
    for line in generate_lines(comp):
        w.write(line)
        w.write("\n")
    return w.getvalue()
