"""Naming and resource limit constants for comprehension building."""

RESERVED_PREFIX = "__"
"""Prefix reserved for generated temporaries; bound names may not use it."""

DEFAULT_OPERATOR = "list"
"""Fold operator used when the expression has no ``op(...)`` wrapper."""

DEFAULT_MAX_EXPRESSION_LENGTH = 10000
"""Maximum comprehension expression length (CWE-400 prevention)."""

PROCEDURE_NAME = "__comprehension"
SOURCE_FILENAME = "<comprehension>"

RESULT_VAR = "__result"
KEY_VAR = "__key"
VALUE_VAR = "__value"
INPUT_PREFIX = "__in"
INDEX_PREFIX = "__idx"
STEP_PREFIX = "__step"
STOP_PREFIX = "__stop"
COUNTER_PREFIX = "__num"

BIND_NAME = "__bind"
LEN_NAME = "__len"
RANGE_NAME = "__range"
CHECK_STEP_NAME = "__check_step"

INDENT = "    "
