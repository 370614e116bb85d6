"""Code generator tests."""

import pytest

from pycomprehension import generate, parse, source
from pycomprehension._codegen import generate_lines, input_name


def _lines(expr):
    return generate_lines(parse(expr))


class TestFoldTemplates:
    def test_list(self):
        assert _lines("x for x") == [
            "__result = []",
            "for __idx1 in __range(__len(__in1)):",
            "    x = __in1[__idx1]",
            "    __result.append((x))",
        ]

    def test_table(self):
        assert _lines("table(x, x + 1 for x)")[-2:] == [
            "    __key, __value = (x, x + 1)",
            "    __result[__key] = __value",
        ]
        assert _lines("table(x, x + 1 for x)")[0] == "__result = {}"

    def test_sum(self):
        lines = _lines("sum(x**2 for x)")
        assert lines[0] == "__result = 0"
        assert lines[-1] == "    __result = __result + (x**2)"

    @pytest.mark.parametrize("name,comparison", [("min", "<"), ("max", ">")])
    def test_extremum(self, name, comparison):
        lines = _lines(f"{name}(x for x)")
        assert lines[0] == "__result = None"
        assert lines[-3:] == [
            "    __value = (x)",
            f"    if __result is None or __value {comparison} __result:",
            "        __result = __value",
        ]


class TestNesting:
    def test_predicates_innermost_in_source_order(self):
        assert _lines("x for x if a if b") == [
            "__result = []",
            "for __idx1 in __range(__len(__in1)):",
            "    x = __in1[__idx1]",
            "    if (a):",
            "        if (b):",
            "            __result.append((x))",
        ]

    def test_first_clause_outermost(self):
        assert _lines("x*y for x for y if x < y") == [
            "__result = []",
            "for __idx1 in __range(__len(__in1)):",
            "    x = __in1[__idx1]",
            "    for __idx2 in __range(__len(__in2)):",
            "        y = __in2[__idx2]",
            "        if (x < y):",
            "            __result.append((x*y))",
        ]

    def test_input_names_follow_clause_position(self):
        lines = _lines("x*z for x = 1, 2 for z")
        assert "    for __idx2 in __range(__len(__in2)):" in lines
        assert input_name(2) == "__in2"


class TestClauseLoops:
    def test_numeric_inclusive(self):
        assert _lines("x for x = 1, n")[1:5] == [
            "__num1 = (1)",
            "__stop1 = (n)",
            "while __num1 <= __stop1:",
            "    x = __num1",
        ]
        assert _lines("x for x = 1, n")[-1] == "    __num1 = __num1 + 1"

    def test_numeric_with_step(self):
        assert _lines("x for x = 10, 1, -3")[1:5] == [
            "__num1 = (10)",
            "__stop1 = (1)",
            "__step1 = __check_step((-3))",
            "while (__num1 <= __stop1 if __step1 > 0 else __num1 >= __stop1):",
        ]
        assert _lines("x for x = 10, 1, -3")[-1] == "    __num1 = __num1 + __step1"

    def test_numeric_nested_counters_are_distinct(self):
        lines = _lines("x + y for x = 1, 2 for y = x, 3")
        assert "    __num2 = (x)" in lines
        assert "    while __num2 <= __stop2:" in lines

    def test_iterator_single_expression(self):
        assert _lines("k for k, v in d.items()")[1] == "for k, v in (d.items()):"

    def test_iterator_expression_list(self):
        assert _lines("v for v in a, b")[1] == "for v in (a, b):"


class TestGenerate:
    def test_text_matches_lines(self):
        comp = parse("sum(x for x if x)")
        assert generate(comp) == "\n".join(generate_lines(comp)) + "\n"

    def test_pure(self):
        comp = parse("max(x*y for x for y if x < 4 if y < 6)")
        assert generate(comp) == generate(comp)


class TestSource:
    def test_wraps_in_function(self):
        assert source("sum(x**2 for x if x % 2 == 0)") == (
            "def __bind(__len, __range, __check_step):\n"
            "    def __comprehension(__in1=None):\n"
            "        __result = 0\n"
            "        for __idx1 in __range(__len(__in1)):\n"
            "            x = __in1[__idx1]\n"
            "            if (x % 2 == 0):\n"
            "                __result = __result + (x**2)\n"
            "        return __result\n"
            "    return __comprehension\n"
        )

    def test_placeholders_before_inputs(self):
        text = source("x**_1 + _3 for x for y in _2")
        assert "    def __comprehension(_1=None, _2=None, _3=None, __in1=None):\n" in text

    def test_no_parameters(self):
        assert "    def __comprehension():\n" in source("x for x = 1, 3")
