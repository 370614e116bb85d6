"""Per-environment cache of built comprehension procedures."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping
from typing import Any

from pycomprehension._builder import build
from pycomprehension._codegen import generate
from pycomprehension._parser import parse

logger = logging.getLogger(__name__)


def build_comprehension(
    expr: str,
    environment: Mapping[str, Any],
    *,
    max_length: int | None = None,
) -> Callable[..., Any]:
    """Parse, generate and compile ``expr`` without caching."""
    comp = parse(expr, max_length=max_length)
    return build(generate(comp), comp.max_param, comp.for_clauses, environment)


class ComprehensionCache(dict):
    """Builds, caches and returns the procedure for a comprehension string.

    Indexing or calling the cache with an expression returns its procedure,
    building it on first use::

        comp = ComprehensionCache()
        comp["x**2 for x"]([2, 3])   # [4, 9]
        comp("sum(x for x)")([2, 3])  # 5

    Procedures resolve free names against the environment given here, which
    defaults to the globals of the module that created the cache. Caches are
    never shared across environments, so a procedure built for one
    environment is never handed out in another.
    """

    def __init__(
        self,
        environment: Mapping[str, Any] | None = None,
        *,
        max_length: int | None = None,
    ) -> None:
        super().__init__()
        if environment is None:
            environment = sys._getframe(1).f_globals
        self.environment = environment
        self.max_length = max_length

    def __missing__(self, expr: str) -> Callable[..., Any]:
        logger.debug("comprehension cache miss: %r", expr)
        proc = build_comprehension(expr, self.environment, max_length=self.max_length)
        self[expr] = proc
        return proc

    def __call__(self, expr: str) -> Callable[..., Any]:
        return self[expr]

    def new(
        self,
        environment: Mapping[str, Any] | None = None,
        *,
        max_length: int | None = None,
    ) -> ComprehensionCache:
        """Create an empty cache, by default bound to the caller's globals."""
        if environment is None:
            environment = sys._getframe(1).f_globals
        if max_length is None:
            max_length = self.max_length
        return ComprehensionCache(environment, max_length=max_length)
