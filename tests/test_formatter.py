from contextlib import ExitStack

import pytest
from hypothesis import given, strategies as st

from rscodegen import Formatter, Type, Bound, fmt_bounds, fmt_generics


def test_empty_write_is_noop() -> None:
    fmt: Formatter = Formatter()
    fmt.write("")
    assert fmt.getvalue() == ""
    assert fmt.is_start_of_line()


def test_indent_applied_once_per_line() -> None:
    fmt: Formatter = Formatter()
    with fmt.indent():
        fmt.write("let x")
        fmt.write(" = ")
        fmt.write("1;\n")
    assert fmt.getvalue() == "    let x = 1;\n"


def test_blank_lines_are_not_indented() -> None:
    fmt: Formatter = Formatter()
    with fmt.indent():
        fmt.write("a\n\nb\n")
    assert fmt.getvalue() == "    a\n\n    b\n"


def test_no_trailing_newline_continues_line() -> None:
    fmt: Formatter = Formatter()
    fmt.write("a\nb")
    assert not fmt.is_start_of_line()
    with fmt.indent():
        fmt.write("c\n")
    assert fmt.getvalue() == "a\nbc\n"


def test_block_separates_brace_with_space() -> None:
    fmt: Formatter = Formatter()
    fmt.write("fn f()")
    with fmt.block():
        fmt.write("x;\n")
    assert fmt.getvalue() == "fn f() {\n    x;\n}\n"


def test_block_at_line_start_has_no_space() -> None:
    fmt: Formatter = Formatter()
    with fmt.block():
        pass
    assert fmt.getvalue() == "{\n}\n"


def test_nested_blocks() -> None:
    fmt: Formatter = Formatter()
    fmt.write("mod a")
    with fmt.block():
        fmt.write("mod b")
        with fmt.block():
            fmt.write("x\n")
    assert fmt.getvalue() == "mod a {\n    mod b {\n        x\n    }\n}\n"


def test_level_restored_when_body_raises() -> None:
    fmt: Formatter = Formatter()
    with pytest.raises(ValueError, match="boom"):
        with fmt.block():
            with fmt.indent():
                raise ValueError("boom")
    assert fmt.level == 0


def test_custom_indent_width() -> None:
    fmt: Formatter = Formatter(indent_width=2)
    with fmt.indent():
        fmt.write("x\n")
    assert fmt.getvalue() == "  x\n"


def test_fmt_generics() -> None:
    fmt: Formatter = Formatter()
    fmt_generics([], fmt)
    assert fmt.getvalue() == ""
    fmt_generics(["T", "U"], fmt)
    assert fmt.getvalue() == "<T, U>"


def test_fmt_bounds_aligns_clauses() -> None:
    fmt: Formatter = Formatter()
    fmt.write("struct Foo<T, U>")
    fmt_bounds([Bound("T", [Type("Clone"), Type("Send")]), Bound("U", [Type("Baz")])], fmt)
    assert fmt.getvalue() == "struct Foo<T, U>\nwhere T: Clone + Send,\n      U: Baz,\n"


@given(st.integers(min_value=0, max_value=6), st.lists(st.text(alphabet="abc;", min_size=1), max_size=4))
def test_every_line_indented_by_depth(depth: int, lines: list[str]) -> None:
    fmt: Formatter = Formatter()
    with ExitStack() as stack:
        for _ in range(depth):
            stack.enter_context(fmt.indent())
        for line in lines:
            fmt.write(line + "\n")
    assert fmt.level == 0
    for out in fmt.getvalue().splitlines():
        assert out.startswith(" " * (4 * depth))
        assert not out[4 * depth:].startswith(" ")
