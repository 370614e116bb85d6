"""Procedure builder: compiles generated code into a callable."""

from __future__ import annotations

import logging
import types
from collections.abc import Callable, Mapping
from io import StringIO
from typing import Any

from pycomprehension._codegen import generate_lines, input_name
from pycomprehension._constants import (
    BIND_NAME,
    CHECK_STEP_NAME,
    INDENT,
    LEN_NAME,
    PROCEDURE_NAME,
    RANGE_NAME,
    RESULT_VAR,
    SOURCE_FILENAME,
)
from pycomprehension._errors import ERR_MSG_COMPILE_FAILED, CompileError
from pycomprehension._types import Comprehension, ForClause

logger = logging.getLogger(__name__)


def check_step(step: Any) -> Any:
    """Reject a zero step in a numeric ``for`` clause."""
    if step == 0:
        raise ValueError("numeric for step must not be zero")
    return step


# Helpers the generated loops call. They reach the procedure through its
# closure, so neither the environment nor a loop variable can replace them.
_RUNTIME: dict[str, Any] = {
    LEN_NAME: len,
    RANGE_NAME: range,
    CHECK_STEP_NAME: check_step,
}


def parameter_names(max_param: int, clauses: tuple[ForClause, ...]) -> list[str]:
    """Positional parameters: ``_1.._N`` then one per implicit input."""
    names = [f"_{i}" for i in range(1, max_param + 1)]
    names.extend(
        input_name(i)
        for i, clause in enumerate(clauses, start=1)
        if clause.has_implicit_input
    )
    return names


def wrap_source(body: list[str], max_param: int, clauses: tuple[ForClause, ...]) -> str:
    """Wrap a generated body in a function definition returning the result.

    The procedure is nested in a binder whose arguments are the runtime
    helpers, which makes them closure variables of the procedure.
    """
    params = ", ".join(f"{name}=None" for name in parameter_names(max_param, clauses))
    w = StringIO()
    w.write(f"def {BIND_NAME}({', '.join(_RUNTIME)}):\n")
    w.write(f"{INDENT}def {PROCEDURE_NAME}({params}):\n")
    for line in body:
        w.write(f"{INDENT * 2}{line}\n")
    w.write(f"{INDENT * 2}return {RESULT_VAR}\n")
    w.write(f"{INDENT}return {PROCEDURE_NAME}\n")
    return w.getvalue()


def source(comp: Comprehension) -> str:
    """Full procedure source for a parsed comprehension."""
    return wrap_source(generate_lines(comp), comp.max_param, comp.for_clauses)


def build(
    code: str,
    max_param: int,
    clauses: tuple[ForClause, ...],
    environment: Mapping[str, Any],
) -> Callable[..., Any]:
    """Compile generated procedure body ``code`` into a callable.

    Names not bound by the procedure itself (helper functions, constants)
    resolve against ``environment``. A ``dict`` is used live; any other
    mapping is copied.

    Raises:
        CompileError: If the generated source does not compile.
    """
    text = wrap_source(code.rstrip("\n").split("\n"), max_param, clauses)
    logger.debug("generated comprehension source:\n%s", text)

    try:
        compiled = compile(text, SOURCE_FILENAME, "exec")
    except (SyntaxError, ValueError) as e:
        raise CompileError(
            ERR_MSG_COMPILE_FAILED,
            f"{e} with generated code:\n{text}",
            wrapped=e,
            source=text,
        ) from e

    namespace: dict[str, Any] = {}
    exec(compiled, namespace)
    proc = namespace[BIND_NAME](*_RUNTIME.values())

    env = environment if isinstance(environment, dict) else dict(environment)
    return types.FunctionType(
        proc.__code__, env, PROCEDURE_NAME, proc.__defaults__, proc.__closure__
    )
