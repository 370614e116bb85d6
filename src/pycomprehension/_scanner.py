"""Lexical scanner for host (Python) expression text.

The scanner splits comprehension text into lark tokens so the parser can find
clause keywords and balanced bracket spans without looking inside string
literals or comments. Comments and whitespace are dropped by the lexer;
string literals come through as opaque ``STRING`` tokens.
"""

from __future__ import annotations

import ast
import re

from lark import Lark, Token
from lark.exceptions import UnexpectedInput

from pycomprehension._errors import (
    ERR_MSG_INVALID_TOKEN,
    ERR_MSG_UNBALANCED,
    ComprehensionSyntaxError,
)

_GRAMMAR = r"""
start: _token*
_token: STRING | NAME | NUMBER | LPAR | RPAR | COMMA | OP

STRING.3: /(?i:rb|br|fr|rf|[rbuf])?("{3}(?:[^\\]|\\.)*?"{3}|'{3}(?:[^\\]|\\.)*?'{3}|"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')/s
COMMENT.3: /#[^\n]*/
NUMBER.2: /0[xXoObB][0-9a-fA-F_]+|(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][-+]?\d[\d_]*)?[jJ]?/
NAME: /[^\W\d]\w*/
LPAR: /[(\[{]/
RPAR: /[)\]}]/
COMMA: ","
OP: /\*\*|\/\/|<<|>>|[=!<>:]=|->|[-+*\/%@&|^~<>=.:;!]/
WS: /(?:\s|\\\r?\n)+/

%ignore WS
%ignore COMMENT
"""

_lexer = Lark(_GRAMMAR, parser="lalr", lexer="basic")

_PLACEHOLDER_RE = re.compile(r"^_(\d+)$")

_CLOSERS = {"(": ")", "[": "]", "{": "}"}

_FSTRING_PREFIX_RE = re.compile(r"^[a-zA-Z]*[fF]")


def tokenize(text: str) -> list[Token]:
    """Split host expression text into significant tokens.

    Raises:
        ComprehensionSyntaxError: If the text holds a character no token
            class accepts, such as an unterminated string literal.
    """
    try:
        return list(_lexer.lex(text))
    except UnexpectedInput as e:
        pos = getattr(e, "pos_in_stream", None) or 0
        raise ComprehensionSyntaxError(
            f"{ERR_MSG_INVALID_TOKEN} {text[pos:]!r}",
            f"lexer rejected {text!r} at offset {pos}: {e}",
            wrapped=e,
            expression=text,
            remainder=text[pos:],
        ) from e


def match_bracketed(text: str, tokens: list[Token], start: int) -> int:
    """Return the index of the token closing the bracket opened at ``start``."""
    stack: list[str] = []
    for i in range(start, len(tokens)):
        tok = tokens[i]
        if tok.type == "LPAR":
            stack.append(_CLOSERS[tok.value])
        elif tok.type == "RPAR":
            if not stack or stack.pop() != tok.value:
                break
            if not stack:
                return i
    remainder = text[tokens[start].start_pos:]
    raise ComprehensionSyntaxError(
        f"{ERR_MSG_UNBALANCED} {remainder!r}",
        f"no matching bracket for {tokens[start].value!r} at offset "
        f"{tokens[start].start_pos} in {text!r}",
        expression=text,
        remainder=remainder,
    )


def join_tokens(tokens: list[Token]) -> str:
    """Reassemble the source of a token run on a single line.

    Gaps between tokens (whitespace, comments, line continuations) collapse
    to one space; tokens that were adjacent stay adjacent.
    """
    parts: list[str] = []
    prev_end: int | None = None
    for tok in tokens:
        if prev_end is not None and tok.start_pos > prev_end:
            parts.append(" ")
        parts.append(_single_line(tok))
        prev_end = tok.end_pos
    return "".join(parts)


def max_placeholder(tokens: list[Token]) -> int:
    """Return the highest ``_N`` placeholder number referenced, or 0.

    Placeholders inside f-string replacement fields count too; plain string
    literals are skipped.
    """
    highest = 0
    for tok in tokens:
        if tok.type == "NAME":
            names = [tok.value]
        elif tok.type == "STRING" and _FSTRING_PREFIX_RE.match(tok.value):
            names = _fstring_names(tok)
        else:
            continue
        for name in names:
            m = _PLACEHOLDER_RE.match(name)
            if m:
                highest = max(highest, int(m.group(1)))
    return highest


def _fstring_names(tok: Token) -> list[str]:
    """Names referenced by the replacement fields of an f-string literal."""
    value = str(tok)
    try:
        tree = ast.parse(value, mode="eval")
    except SyntaxError as e:
        raise ComprehensionSyntaxError(
            f"{ERR_MSG_INVALID_TOKEN} {value!r}",
            f"f-string {value!r} at offset {tok.start_pos} does not parse: {e}",
            wrapped=e,
            expression=value,
            remainder=value,
        ) from e
    return [node.id for node in ast.walk(tree) if isinstance(node, ast.Name)]


def _single_line(tok: Token) -> str:
    """Rewrite a multi-line string literal so it fits on one source line."""
    value = str(tok)
    if tok.type != "STRING" or "\n" not in value:
        return value
    if _FSTRING_PREFIX_RE.match(value):
        # Replacement fields are not constant, so only the newlines are escaped.
        return value.replace("\r\n", "\\n").replace("\n", "\\n")
    return repr(ast.literal_eval(value))
