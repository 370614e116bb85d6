"""Comprehension parser.

Splits a comprehension such as ``"sum(x**2 for x if x % 2 == 0)"`` into its
output expression list, ``for`` clauses, ``if`` predicates, fold operator and
placeholder count. Sub-expressions are kept as opaque host-language text.
"""

from __future__ import annotations

import keyword

from lark import Token

from pycomprehension._constants import (
    DEFAULT_MAX_EXPRESSION_LENGTH,
    DEFAULT_OPERATOR,
    RESERVED_PREFIX,
)
from pycomprehension._errors import (
    ERR_MSG_ARRAY_NAMES,
    ERR_MSG_MISSING_FOR,
    ERR_MSG_MISSING_OUTPUT,
    ERR_MSG_MISSING_PREDICATE,
    ERR_MSG_NUMERIC_ARITY,
    ERR_MSG_NUMERIC_NAMES,
    ERR_MSG_RESERVED_PREFIX,
    ERR_MSG_SYNTAX,
    ERR_MSG_TOO_LONG,
    ERR_MSG_UNKNOWN_OPERATOR,
    ERR_MSG_UNRECOGNIZED,
    ERR_MSG_ZERO_EXPRESSIONS,
    ERR_MSG_ZERO_VARIABLES,
    ComprehensionSyntaxError,
    ExpressionTooLongError,
    ReservedNameError,
    UnknownOperatorError,
)
from pycomprehension._operators import FOLD_OPERATORS
from pycomprehension._scanner import (
    join_tokens,
    match_bracketed,
    max_placeholder,
    tokenize,
)
from pycomprehension._types import ClauseKind, Comprehension, ForClause


def parse(expr: str, *, max_length: int | None = None) -> Comprehension:
    """Parse a comprehension expression.

    Args:
        expr: The comprehension text, e.g. ``"x**2 for x if x > 0"``.
        max_length: Maximum accepted expression length. Defaults to 10000.

    Returns:
        The parsed Comprehension.

    Raises:
        ComprehensionSyntaxError: If the expression is malformed.
    """
    limit = DEFAULT_MAX_EXPRESSION_LENGTH if max_length is None else max_length
    if len(expr) > limit:
        raise ExpressionTooLongError(
            ERR_MSG_TOO_LONG,
            f"expression length {len(expr)} exceeds limit {limit}",
            expression=expr,
        )
    return _Parser(expr).parse()


class _Parser:
    """Cursor over the significant tokens of one comprehension."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = tokenize(text)
        self._pos = 0
        self._end = len(self._tokens)

    # ---- Cursor helpers ----

    def _peek(self, offset: int = 0) -> Token | None:
        i = self._pos + offset
        if i < self._end:
            return self._tokens[i]
        return None

    def _at_keyword(self, word: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.type == "NAME" and tok.value == word

    def _at_op(self, op: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.type == "OP" and tok.value == op

    def _at_comma(self) -> bool:
        tok = self._peek()
        return tok is not None and tok.type == "COMMA"

    def _remainder(self) -> str:
        if self._pos < len(self._tokens):
            return self._text[self._tokens[self._pos].start_pos:]
        return ""

    def _error(
        self,
        message: str,
        cls: type[ComprehensionSyntaxError] = ComprehensionSyntaxError,
    ) -> ComprehensionSyntaxError:
        remainder = self._remainder()
        return cls(
            message,
            f"{message} at {remainder!r} in {self._text!r}",
            expression=self._text,
            remainder=remainder,
        )

    # ---- Grammar ----

    def parse(self) -> Comprehension:
        op_name = self._parse_operator()

        out = self._parse_explist()
        if not out:
            raise self._error(ERR_MSG_MISSING_OUTPUT)

        clauses: list[ForClause] = []
        while self._at_keyword("for"):
            self._pos += 1
            clauses.append(self._parse_for_clause())
        if not clauses:
            raise self._error(ERR_MSG_MISSING_FOR)

        predicates: list[str] = []
        while self._at_keyword("if"):
            self._pos += 1
            pred = self._parse_expression()
            if pred is None:
                raise self._error(ERR_MSG_MISSING_PREDICATE)
            predicates.append(pred)

        max_param = max_placeholder(self._tokens)

        if self._pos != self._end:
            raise self._error(f"{ERR_MSG_UNRECOGNIZED} {self._remainder()}")

        return Comprehension(
            out=", ".join(out),
            for_clauses=tuple(clauses),
            predicates=tuple(predicates),
            op_name=op_name,
            max_param=max_param,
        )

    def _parse_operator(self) -> str:
        """Detect an ``op(...)`` wrapper spanning the whole expression.

        A call at the start is only a fold operator when its closing
        parenthesis is the last token; otherwise it belongs to the output
        expression and parsing restarts from the first token.
        """
        first, second = self._peek(), self._peek(1)
        if (
            first is None
            or second is None
            or first.type != "NAME"
            or keyword.iskeyword(first.value)
            or second.value != "("
        ):
            return DEFAULT_OPERATOR

        close = match_bracketed(self._text, self._tokens, 1)
        if close != len(self._tokens) - 1:
            return DEFAULT_OPERATOR

        if first.value not in FOLD_OPERATORS:
            raise self._error(
                f"{ERR_MSG_UNKNOWN_OPERATOR} {first.value!r}",
                UnknownOperatorError,
            )
        self._pos = 2
        self._end = close
        return first.value

    def _parse_for_clause(self) -> ForClause:
        names = self._parse_namelist()
        if not names:
            raise self._error(ERR_MSG_ZERO_VARIABLES)
        for name in names:
            if name.startswith(RESERVED_PREFIX):
                raise self._error(
                    f"identifier {name} {ERR_MSG_RESERVED_PREFIX} {RESERVED_PREFIX!r}",
                    ReservedNameError,
                )

        if self._at_op("="):
            kind = ClauseKind.NUMERIC
        elif self._at_keyword("in"):
            kind = ClauseKind.ITERATOR
        else:
            if len(names) != 1:
                raise self._error(ERR_MSG_ARRAY_NAMES)
            return ForClause(names=tuple(names))
        if kind is ClauseKind.NUMERIC and len(names) != 1:
            raise self._error(ERR_MSG_NUMERIC_NAMES)
        self._pos += 1

        exprs = self._parse_explist()
        if not exprs:
            raise self._error(ERR_MSG_ZERO_EXPRESSIONS)
        if kind is ClauseKind.NUMERIC and len(exprs) not in (2, 3):
            raise self._error(ERR_MSG_NUMERIC_ARITY)
        return ForClause(names=tuple(names), kind=kind, range_exprs=tuple(exprs))

    def _parse_namelist(self) -> list[str]:
        names: list[str] = []
        while True:
            tok = self._peek()
            if tok is None or tok.type != "NAME" or keyword.iskeyword(tok.value):
                if names:
                    raise self._error(f"{ERR_MSG_SYNTAX}: expected name after ','")
                return names
            names.append(tok.value)
            self._pos += 1
            if not self._at_comma():
                return names
            self._pos += 1

    def _parse_explist(self) -> list[str]:
        exprs: list[str] = []
        while True:
            expr = self._parse_expression()
            if expr is None:
                if exprs:
                    raise self._error(f"{ERR_MSG_SYNTAX}: expected expression after ','")
                return exprs
            exprs.append(expr)
            if not self._at_comma():
                return exprs
            self._pos += 1

    def _parse_expression(self) -> str | None:
        """Consume one expression up to a depth-0 ``,``, ``for`` or ``if``."""
        start = self._pos
        while self._pos < self._end:
            tok = self._tokens[self._pos]
            if tok.type == "COMMA" or tok.type == "RPAR":
                break
            if tok.type == "NAME" and tok.value == "for":
                break
            if tok.type == "NAME" and tok.value == "if" and not self._is_conditional():
                break
            if tok.type == "LPAR":
                self._pos = match_bracketed(self._text, self._tokens, self._pos)
            self._pos += 1
        if self._pos == start:
            return None
        return join_tokens(self._tokens[start:self._pos])

    def _is_conditional(self) -> bool:
        """Whether the ``if`` at the cursor starts ``a if b else c``."""
        i = self._pos + 1
        while i < self._end:
            tok = self._tokens[i]
            if tok.type in ("COMMA", "RPAR"):
                return False
            if tok.type == "NAME" and tok.value in ("for", "if"):
                return False
            if tok.type == "NAME" and tok.value == "else":
                return True
            if tok.type == "LPAR":
                i = match_bracketed(self._text, self._tokens, i)
            i += 1
        return False
