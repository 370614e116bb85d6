"""Exception hierarchy for comprehension parsing and building."""

from __future__ import annotations


class ComprehensionError(Exception):
    """Base exception for comprehension errors.

    Provides dual messaging: a user-facing message naming the violated rule
    and internal details (full expression, generated source) for logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class ComprehensionSyntaxError(ComprehensionError):
    """Raised when a comprehension expression is malformed."""

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
        *,
        expression: str = "",
        remainder: str = "",
    ) -> None:
        super().__init__(user_message, internal_details, wrapped)
        self.expression = expression
        self.remainder = remainder


class ReservedNameError(ComprehensionSyntaxError):
    """Raised when a bound variable uses the reserved internal prefix."""


class UnknownOperatorError(ComprehensionSyntaxError):
    """Raised when a fold operator name is not registered."""


class ExpressionTooLongError(ComprehensionSyntaxError):
    """Raised when an expression exceeds the configured length limit."""


class CompileError(ComprehensionError):
    """Raised when generated source fails to compile.

    This indicates a code generator defect, not a user input problem, so the
    full generated source is attached for diagnosis.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
        *,
        source: str = "",
    ) -> None:
        super().__init__(user_message, internal_details, wrapped)
        self.source = source


# User-facing error message constants
ERR_MSG_SYNTAX = "syntax error"
ERR_MSG_MISSING_OUTPUT = "syntax error: missing expression list"
ERR_MSG_MISSING_FOR = 'syntax error: missing "for" clause'
ERR_MSG_ZERO_VARIABLES = "syntax error: zero variables"
ERR_MSG_ZERO_EXPRESSIONS = "syntax error: zero expressions"
ERR_MSG_NUMERIC_ARITY = "syntax error: numeric for requires 2 or 3 expressions"
ERR_MSG_NUMERIC_NAMES = "syntax error: numeric for requires exactly one variable"
ERR_MSG_ARRAY_NAMES = "syntax error: array for requires exactly one variable"
ERR_MSG_MISSING_PREDICATE = "syntax error: predicate expression not found"
ERR_MSG_UNRECOGNIZED = "syntax error: unrecognized"
ERR_MSG_UNBALANCED = "syntax error: unbalanced brackets"
ERR_MSG_INVALID_TOKEN = "syntax error: invalid token"
ERR_MSG_RESERVED_PREFIX = "may not start with reserved prefix"
ERR_MSG_UNKNOWN_OPERATOR = "unknown fold operator"
ERR_MSG_TOO_LONG = "comprehension expression too long"
ERR_MSG_COMPILE_FAILED = "generated comprehension failed to compile"
