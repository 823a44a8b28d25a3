from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from .keywords import KW_WHERE

if TYPE_CHECKING:
    from .model import Bound, Type

DEFAULT_INDENT: int = 4


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


@dataclass
class Formatter:
    """
    Indentation-aware text sink for rendering declaration trees.

    Indentation is applied once per output line, at the moment the first
    non-empty text of that line is written, no matter how many ``write``
    calls compose the line.
    """
    indent_width: int = DEFAULT_INDENT
    _parts: list[str] = field(default_factory=list)
    _level: int = 0
    _at_line_start: bool = True

    def write(self, text: str) -> None:
        if not text:
            return
        should_indent = self._at_line_start
        for i, line in enumerate(_lines(text)):
            if i:
                self._parts.append("\n")
            if should_indent and line:
                self._parts.append(" " * (self._level * self.indent_width))
            should_indent = True
            self._parts.append(line)
        if text.endswith("\n"):
            self._parts.append("\n")
            self._at_line_start = True
        else:
            self._at_line_start = False

    def is_start_of_line(self) -> bool:
        return self._at_line_start

    def indent(self) -> "_Indent":
        return _Indent(self)

    def block(self) -> "_BraceBlock":
        return _BraceBlock(self)

    @property
    def level(self) -> int:
        return self._level

    def getvalue(self) -> str:
        return "".join(self._parts)


class _Indent:
    def __init__(self, fmt: Formatter) -> None:
        self.fmt = fmt

    def __enter__(self) -> None:
        self.fmt._level += 1

    def __exit__(self, exc_type, exc, tb) -> None:
        self.fmt._level -= 1


class _BraceBlock:
    def __init__(self, fmt: Formatter) -> None:
        self.fmt = fmt
        self._indent = _Indent(fmt)

    def __enter__(self) -> None:
        if not self.fmt.is_start_of_line():
            self.fmt.write(" ")
        self.fmt.write("{\n")
        self._indent.__enter__()

    def __exit__(self, exc_type, exc, tb) -> None:
        self._indent.__exit__(exc_type, exc, tb)
        if exc_type is None:
            self.fmt.write("}\n")


# -----------------------------
# Generic and bound helpers
# -----------------------------

def fmt_generics(generics: Sequence[str], fmt: Formatter) -> None:
    if generics:
        fmt.write(f"<{', '.join(generics)}>")


def fmt_bound_rhs(tys: Sequence[Type], fmt: Formatter) -> None:
    for i, ty in enumerate(tys):
        if i:
            fmt.write(" + ")
        ty.to_code(fmt)


def fmt_bounds(bounds: Sequence[Bound], fmt: Formatter) -> None:
    """Write a ``where`` section, one clause per bound, aligned under the first."""
    if not bounds:
        return
    fmt.write("\n")

    first, *rest = bounds
    fmt.write(f"{KW_WHERE} {first.name}: ")
    fmt_bound_rhs(first.bound, fmt)
    fmt.write(",\n")

    pad = " " * (len(KW_WHERE) + 1)
    for bound in rest:
        fmt.write(f"{pad}{bound.name}: ")
        fmt_bound_rhs(bound.bound, fmt)
        fmt.write(",\n")
