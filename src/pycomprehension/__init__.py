"""pycomprehension - Build fold procedures from set-builder comprehension strings."""

from __future__ import annotations

try:
    from pycomprehension._version import __version__
except ModuleNotFoundError:  # editable install without VCS metadata
    __version__ = "0.0.0.dev0"

import sys
from collections.abc import Callable, Mapping
from typing import Any

from pycomprehension import _builder
from pycomprehension._cache import ComprehensionCache, build_comprehension
from pycomprehension._codegen import generate
from pycomprehension._errors import (
    CompileError,
    ComprehensionError,
    ComprehensionSyntaxError,
    ExpressionTooLongError,
    ReservedNameError,
    UnknownOperatorError,
)
from pycomprehension._operators import FOLD_OPERATORS, FoldOperator
from pycomprehension._parser import parse
from pycomprehension._types import ClauseKind, Comprehension, ForClause

__all__ = [
    "build",
    "generate",
    "new",
    "parse",
    "source",
    "ClauseKind",
    "Comprehension",
    "ComprehensionCache",
    "FoldOperator",
    "ForClause",
    "FOLD_OPERATORS",
    "CompileError",
    "ComprehensionError",
    "ComprehensionSyntaxError",
    "ExpressionTooLongError",
    "ReservedNameError",
    "UnknownOperatorError",
]


def build(
    expr: str,
    environment: Mapping[str, Any] | None = None,
    *,
    max_length: int | None = None,
) -> Callable[..., Any]:
    """Build the procedure for a comprehension string, bypassing any cache.

    Args:
        expr: The comprehension, e.g. ``"sum(x*y for x for y if x < y)"``.
        environment: Mapping that free names in the expression resolve
            against. Defaults to the caller's module globals.
        max_length: Maximum accepted expression length. Defaults to 10000.

    Returns:
        A callable taking the placeholder values ``_1.._N`` followed by one
        sequence per implicit ``for`` input, in clause order.

    Raises:
        ComprehensionSyntaxError: If the expression is malformed.
        CompileError: If the generated source fails to compile.
    """
    if environment is None:
        environment = sys._getframe(1).f_globals
    return build_comprehension(expr, environment, max_length=max_length)


def source(expr: str, *, max_length: int | None = None) -> str:
    """Return the Python source generated for a comprehension string.

    Raises:
        ComprehensionSyntaxError: If the expression is malformed.
    """
    return _builder.source(parse(expr, max_length=max_length))


def new(
    environment: Mapping[str, Any] | None = None,
    *,
    max_length: int | None = None,
) -> ComprehensionCache:
    """Create a comprehension cache bound to ``environment``.

    Args:
        environment: Mapping that free names resolve against. Defaults to
            the caller's module globals.
        max_length: Maximum accepted expression length for every build.

    Returns:
        An empty ComprehensionCache.
    """
    if environment is None:
        environment = sys._getframe(1).f_globals
    return ComprehensionCache(environment, max_length=max_length)
