"""Declaration nodes for Rust source and their render drivers.

Every node is a plain dataclass that owns its children by value. Builder
methods are thin setters: the chainable ones return ``self`` and the
``new_*`` factories return the freshly created child so it can be configured
further. Rendering goes through a shared :class:`~rscodegen.formatter.Formatter`
via each node's ``to_code`` method.
"""

from __future__ import annotations

import copy
from dataclasses import InitVar, dataclass, field
from enum import Enum as _Enum
from typing import TypeVar

from .errors import ContractViolation, FieldShapeError
from .formatter import Formatter, fmt_bound_rhs, fmt_bounds, fmt_generics
from .keywords import (
    KW_CONST, KW_ENUM, KW_EXTERN, KW_FN, KW_FOR, KW_IMPL, KW_STRUCT, KW_TRAIT, KW_TYPE,
)


# -----------------------------
# Types & bounds
# -----------------------------

@dataclass
class Type:
    name: str
    generics: list[Type] = field(default_factory=list)

    def generic(self, ty: Type | str) -> Type:
        if "<" in self.name:
            raise ContractViolation(f"type name `{self.name}` already includes generics")
        self.generics.append(as_type(ty))
        return self

    def path(self, prefix: str) -> Type:
        """Return a copy of this type qualified with ``prefix::``."""
        if "::" in self.name:
            raise ContractViolation(f"type name `{self.name}` is already a path")
        return Type(f"{prefix}::{self.name}", copy.deepcopy(self.generics))

    def to_code(self, fmt: Formatter) -> None:
        fmt.write(self.name)
        if self.generics:
            fmt.write("<")
            for i, ty in enumerate(self.generics):
                if i:
                    fmt.write(", ")
                ty.to_code(fmt)
            fmt.write(">")


def as_type(ty: Type | str) -> Type:
    if isinstance(ty, Type):
        return copy.deepcopy(ty)
    return Type(ty)


@dataclass
class Bound:
    name: str
    bound: list[Type] = field(default_factory=list)


@dataclass
class Docs:
    text: str

    def to_code(self, fmt: Formatter) -> None:
        if not self.text:
            return
        lines = self.text.split("\n")
        if self.text.endswith("\n"):
            lines.pop()
        for line in lines:
            line = line.removesuffix("\r")
            fmt.write(f"/// {line}\n")


# -----------------------------
# Fields & variants
# -----------------------------

@dataclass
class Field:
    name: str
    ty: Type
    documentation: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    visibility: str | None = None

    def __post_init__(self) -> None:
        self.ty = as_type(self.ty)

    def doc(self, documentation: list[str]) -> Field:
        self.documentation = list(documentation)
        return self

    def annotation(self, annotations: list[str]) -> Field:
        self.annotations = list(annotations)
        return self

    def vis(self, visibility: str) -> Field:
        self.visibility = visibility
        return self

    def to_code(self, fmt: Formatter) -> None:
        for doc in self.documentation:
            Docs(doc).to_code(fmt)
        for ann in self.annotations:
            fmt.write(f"{ann}\n")
        if self.visibility:
            fmt.write(f"{self.visibility} ")
        fmt.write(f"{self.name}: ")
        self.ty.to_code(fmt)
        fmt.write(",\n")


class FieldsShape(_Enum):
    EMPTY = "empty"
    TUPLE = "tuple"
    NAMED = "named"


@dataclass
class Fields:
    """Data members of a struct or variant: empty, all positional or all named."""
    named_fields: list[Field] = field(default_factory=list)
    tuple_types: list[Type] = field(default_factory=list)

    @property
    def shape(self) -> FieldsShape:
        if self.named_fields:
            return FieldsShape.NAMED
        if self.tuple_types:
            return FieldsShape.TUPLE
        return FieldsShape.EMPTY

    def push_named(self, fld: Field) -> Field:
        if self.shape is FieldsShape.TUPLE:
            raise FieldShapeError(f"cannot add named field `{fld.name}` to a tuple field list")
        self.named_fields.append(fld)
        return fld

    def named(self, name: str, ty: Type | str) -> Field:
        return self.push_named(Field(name, as_type(ty)))

    def tuple(self, ty: Type | str) -> Type:
        if self.shape is FieldsShape.NAMED:
            raise FieldShapeError("cannot add a tuple field to a named field list")
        t = as_type(ty)
        self.tuple_types.append(t)
        return t

    def to_code(self, fmt: Formatter) -> None:
        shape = self.shape
        if shape is FieldsShape.NAMED:
            with fmt.block():
                for fld in self.named_fields:
                    fld.to_code(fmt)
        elif shape is FieldsShape.TUPLE:
            fmt.write("(")
            for i, ty in enumerate(self.tuple_types):
                if i:
                    fmt.write(", ")
                ty.to_code(fmt)
            fmt.write(")")


@dataclass
class Variant:
    name: str
    fields: Fields = field(default_factory=Fields)
    documentation: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)

    def named(self, name: str, ty: Type | str) -> Variant:
        self.fields.named(name, ty)
        return self

    def tuple(self, ty: Type | str) -> Variant:
        self.fields.tuple(ty)
        return self

    def doc(self, documentation: list[str]) -> Variant:
        self.documentation = list(documentation)
        return self

    def annotation(self, annotations: list[str]) -> Variant:
        self.annotations = list(annotations)
        return self

    def to_code(self, fmt: Formatter) -> None:
        for doc in self.documentation:
            Docs(doc).to_code(fmt)
        for ann in self.annotations:
            fmt.write(f"{ann}\n")
        fmt.write(self.name)
        if self.fields.shape is FieldsShape.NAMED:
            # keep the comma on the closing brace line
            fmt.write(" {\n")
            with fmt.indent():
                for fld in self.fields.named_fields:
                    fld.to_code(fmt)
            fmt.write("},\n")
            return
        self.fields.to_code(fmt)
        fmt.write(",\n")


# -----------------------------
# Type definition heads
# -----------------------------

@dataclass
class TypeDef:
    """Shared head of structs, enums, traits and type aliases."""
    ty: Type
    visibility: str | None = None
    docs: Docs | None = None
    derives: list[str] = field(default_factory=list)
    allows: list[str] = field(default_factory=list)
    repr: str | None = None
    bounds: list[Bound] = field(default_factory=list)
    macros: list[str] = field(default_factory=list)

    def add_bound(self, name: str, ty: Type | str) -> None:
        self.bounds.append(Bound(name, [as_type(ty)]))

    def fmt_head(self, keyword: str, parents: list[Type], fmt: Formatter) -> None:
        if self.docs is not None:
            self.docs.to_code(fmt)
        for allow in self.allows:
            fmt.write(f"#[allow({allow})]\n")
        if self.derives:
            fmt.write(f"#[derive({', '.join(self.derives)})]\n")
        if self.repr:
            fmt.write(f"#[repr({self.repr})]\n")
        for m in self.macros:
            fmt.write(f"{m}\n")

        if self.visibility:
            fmt.write(f"{self.visibility} ")
        fmt.write(f"{keyword} ")
        self.ty.to_code(fmt)

        for i, parent in enumerate(parents):
            fmt.write(": " if i == 0 else " + ")
            parent.to_code(fmt)

        fmt_bounds(self.bounds, fmt)


_B = TypeVar("_B", bound="_TypeDefBuilder")


class _TypeDefBuilder:
    """Setters shared by every node that carries a :class:`TypeDef`."""
    type_def: TypeDef

    @property
    def ty(self) -> Type:
        return self.type_def.ty

    def vis(self: _B, visibility: str) -> _B:
        self.type_def.visibility = visibility
        return self

    def generic(self: _B, name: str) -> _B:
        self.type_def.ty.generic(name)
        return self

    def bound(self: _B, name: str, ty: Type | str) -> _B:
        self.type_def.add_bound(name, ty)
        return self

    def doc(self: _B, docs: str) -> _B:
        self.type_def.docs = Docs(docs)
        return self

    def derive(self: _B, name: str) -> _B:
        self.type_def.derives.append(name)
        return self

    def allow(self: _B, allow: str) -> _B:
        self.type_def.allows.append(allow)
        return self

    def repr(self: _B, repr: str) -> _B:
        self.type_def.repr = repr
        return self

    def macro(self: _B, macro: str) -> _B:
        self.type_def.macros.append(macro)
        return self


# -----------------------------
# Structs & enums
# -----------------------------

@dataclass
class Struct(_TypeDefBuilder):
    name: InitVar[str]
    type_def: TypeDef = field(init=False)
    fields: Fields = field(default_factory=Fields)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))

    def push_field(self, fld: Field) -> Struct:
        """Add a named field. Named and tuple fields cannot be mixed."""
        self.fields.push_named(fld)
        return self

    def field(self, name: str, ty: Type | str) -> Struct:
        self.fields.named(name, ty)
        return self

    def new_field(self, name: str, ty: Type | str) -> Field:
        return self.fields.named(name, ty)

    def tuple_field(self, ty: Type | str) -> Struct:
        self.fields.tuple(ty)
        return self

    def to_code(self, fmt: Formatter) -> None:
        self.type_def.fmt_head(KW_STRUCT, [], fmt)
        self.fields.to_code(fmt)
        if self.fields.shape is not FieldsShape.NAMED:
            fmt.write(";\n")


@dataclass
class Enum(_TypeDefBuilder):
    name: InitVar[str]
    type_def: TypeDef = field(init=False)
    variants: list[Variant] = field(default_factory=list)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))

    def new_variant(self, name: str) -> Variant:
        variant = Variant(name)
        self.variants.append(variant)
        return variant

    def push_variant(self, variant: Variant) -> Enum:
        self.variants.append(variant)
        return self

    def to_code(self, fmt: Formatter) -> None:
        self.type_def.fmt_head(KW_ENUM, [], fmt)
        with fmt.block():
            for variant in self.variants:
                variant.to_code(fmt)


# -----------------------------
# Associated items
# -----------------------------

@dataclass
class AssociatedType:
    name: str
    bounds: list[Type] = field(default_factory=list)

    def bound(self, ty: Type | str) -> AssociatedType:
        self.bounds.append(as_type(ty))
        return self

    def to_code(self, fmt: Formatter) -> None:
        fmt.write(f"{KW_TYPE} {self.name}")
        if self.bounds:
            fmt.write(": ")
            fmt_bound_rhs(self.bounds, fmt)
        fmt.write(";\n")


@dataclass
class AssociatedConst:
    name: str
    ty: Type
    expression: str | None = None

    def __post_init__(self) -> None:
        self.ty = as_type(self.ty)

    def value(self, expression: str) -> AssociatedConst:
        self.expression = expression
        return self

    def to_code(self, fmt: Formatter) -> None:
        fmt.write(f"{KW_CONST} {self.name}: ")
        self.ty.to_code(fmt)
        if self.expression is not None:
            fmt.write(f" = {self.expression}")
        fmt.write(";\n")


# -----------------------------
# Function bodies
# -----------------------------

@dataclass
class Block:
    """A brace-delimited code block, e.g. the body of an ``if`` or ``match``."""
    before: str | None = None
    body: list[str | Block] = field(default_factory=list)
    trailing: str | None = None

    def line(self, line: object) -> Block:
        self.body.append(str(line))
        return self

    def push_block(self, block: Block) -> Block:
        self.body.append(block)
        return self

    def after(self, after: str) -> Block:
        self.trailing = after
        return self

    def to_code(self, fmt: Formatter) -> None:
        if self.before:
            fmt.write(self.before)
        if not fmt.is_start_of_line():
            fmt.write(" ")
        fmt.write("{\n")
        with fmt.indent():
            _fmt_body(self.body, fmt)
        fmt.write("}")
        if self.trailing:
            fmt.write(self.trailing)
        fmt.write("\n")


def _fmt_body(body: list[str | Block], fmt: Formatter) -> None:
    for entry in body:
        if isinstance(entry, Block):
            entry.to_code(fmt)
        else:
            fmt.write(f"{entry}\n")


# -----------------------------
# Functions
# -----------------------------

@dataclass
class Function:
    name: str
    docs: Docs | None = None
    allow_lint: str | None = None
    visibility: str | None = None
    generics: list[str] = field(default_factory=list)
    receiver: str | None = None
    args: list[Field] = field(default_factory=list)
    returns: Type | None = None
    bounds: list[Bound] = field(default_factory=list)
    # None means "signature only", legal inside traits
    body: list[str | Block] | None = field(default_factory=list)
    attributes: list[str] = field(default_factory=list)
    abi: str | None = None
    is_async: bool = False

    def doc(self, docs: str) -> Function:
        self.docs = Docs(docs)
        return self

    def allow(self, allow: str) -> Function:
        self.allow_lint = allow
        return self

    def vis(self, visibility: str) -> Function:
        self.visibility = visibility
        return self

    def set_async(self, is_async: bool) -> Function:
        self.is_async = is_async
        return self

    def generic(self, name: str) -> Function:
        self.generics.append(name)
        return self

    def arg_self(self) -> Function:
        self.receiver = "self"
        return self

    def arg_ref_self(self) -> Function:
        self.receiver = "&self"
        return self

    def arg_mut_self(self) -> Function:
        self.receiver = "&mut self"
        return self

    def arg(self, name: str, ty: Type | str) -> Function:
        self.args.append(Field(name, as_type(ty)))
        return self

    def ret(self, ty: Type | str) -> Function:
        self.returns = as_type(ty)
        return self

    def bound(self, name: str, ty: Type | str) -> Function:
        self.bounds.append(Bound(name, [as_type(ty)]))
        return self

    def line(self, line: object) -> Function:
        if self.body is None:
            self.body = []
        self.body.append(str(line))
        return self

    def push_block(self, block: Block) -> Function:
        if self.body is None:
            self.body = []
        self.body.append(block)
        return self

    def attr(self, attribute: str) -> Function:
        """Add an attribute, e.g. ``attr("test")`` renders ``#[test]``."""
        self.attributes.append(attribute)
        return self

    def extern_abi(self, abi: str) -> Function:
        self.abi = abi
        return self

    def to_code(self, fmt: Formatter, is_trait: bool = False) -> None:
        if self.docs is not None:
            self.docs.to_code(fmt)
        if self.allow_lint:
            fmt.write(f"#[allow({self.allow_lint})]\n")
        for attr in self.attributes:
            fmt.write(f"#[{attr}]\n")

        if is_trait and self.visibility:
            raise ContractViolation(
                f"trait fn `{self.name}` cannot have a visibility modifier"
            )
        if self.visibility:
            fmt.write(f"{self.visibility} ")
        if self.abi:
            fmt.write(f'{KW_EXTERN} "{self.abi}" ')
        if self.is_async:
            fmt.write("async ")

        fmt.write(f"{KW_FN} {self.name}")
        fmt_generics(self.generics, fmt)

        fmt.write("(")
        if self.receiver:
            fmt.write(self.receiver)
        for i, arg in enumerate(self.args):
            if i or self.receiver:
                fmt.write(", ")
            fmt.write(f"{arg.name}: ")
            arg.ty.to_code(fmt)
        fmt.write(")")

        if self.returns is not None:
            fmt.write(" -> ")
            self.returns.to_code(fmt)

        fmt_bounds(self.bounds, fmt)

        if self.body is None:
            if not is_trait:
                raise ContractViolation(f"fn `{self.name}` outside a trait must define a body")
            fmt.write(";\n")
            return
        with fmt.block():
            _fmt_body(self.body, fmt)


def _fmt_fns(fns: list[Function], preceded: bool, is_trait: bool, fmt: Formatter) -> None:
    for i, func in enumerate(fns):
        if i or preceded:
            fmt.write("\n")
        func.to_code(fmt, is_trait=is_trait)


# -----------------------------
# Traits & impl blocks
# -----------------------------

@dataclass
class Trait(_TypeDefBuilder):
    name: InitVar[str]
    type_def: TypeDef = field(init=False)
    parents: list[Type] = field(default_factory=list)
    associated_consts: list[AssociatedConst] = field(default_factory=list)
    associated_tys: list[AssociatedType] = field(default_factory=list)
    fns: list[Function] = field(default_factory=list)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))

    def parent(self, ty: Type | str) -> Trait:
        self.parents.append(as_type(ty))
        return self

    def associated_const(self, name: str, ty: Type | str) -> AssociatedConst:
        const = AssociatedConst(name, as_type(ty))
        self.associated_consts.append(const)
        return const

    def associated_type(self, name: str) -> AssociatedType:
        assoc = AssociatedType(name)
        self.associated_tys.append(assoc)
        return assoc

    def new_fn(self, name: str) -> Function:
        """Add a function signature; call ``line`` on it to give it a default body."""
        func = Function(name, body=None)
        self.fns.append(func)
        return func

    def push_fn(self, func: Function) -> Trait:
        self.fns.append(func)
        return self

    def to_code(self, fmt: Formatter) -> None:
        self.type_def.fmt_head(KW_TRAIT, self.parents, fmt)
        with fmt.block():
            for const in self.associated_consts:
                const.to_code(fmt)
            for assoc in self.associated_tys:
                assoc.to_code(fmt)
            preceded = bool(self.associated_consts or self.associated_tys)
            _fmt_fns(self.fns, preceded, True, fmt)


@dataclass
class Impl:
    target: Type
    generics: list[str] = field(default_factory=list)
    trait_ty: Type | None = None
    associated_consts: list[AssociatedConst] = field(default_factory=list)
    associated_tys: list[Field] = field(default_factory=list)
    bounds: list[Bound] = field(default_factory=list)
    fns: list[Function] = field(default_factory=list)
    macros: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.target = as_type(self.target)

    def generic(self, name: str) -> Impl:
        """Add a generic to the block itself (``impl<T>``), not to the target."""
        self.generics.append(name)
        return self

    def target_generic(self, ty: Type | str) -> Impl:
        self.target.generic(ty)
        return self

    def impl_trait(self, ty: Type | str) -> Impl:
        self.trait_ty = as_type(ty)
        return self

    def macro(self, macro: str) -> Impl:
        self.macros.append(macro)
        return self

    def associate_const(self, name: str, ty: Type | str) -> AssociatedConst:
        const = AssociatedConst(name, as_type(ty))
        self.associated_consts.append(const)
        return const

    def associate_type(self, name: str, ty: Type | str) -> Impl:
        self.associated_tys.append(Field(name, as_type(ty)))
        return self

    def bound(self, name: str, ty: Type | str) -> Impl:
        self.bounds.append(Bound(name, [as_type(ty)]))
        return self

    def new_fn(self, name: str) -> Function:
        func = Function(name)
        self.fns.append(func)
        return func

    def push_fn(self, func: Function) -> Impl:
        self.fns.append(func)
        return self

    def to_code(self, fmt: Formatter) -> None:
        for m in self.macros:
            fmt.write(f"{m}\n")
        fmt.write(KW_IMPL)
        fmt_generics(self.generics, fmt)

        if self.trait_ty is not None:
            fmt.write(" ")
            self.trait_ty.to_code(fmt)
            fmt.write(f" {KW_FOR}")

        fmt.write(" ")
        self.target.to_code(fmt)
        fmt_bounds(self.bounds, fmt)

        with fmt.block():
            for const in self.associated_consts:
                const.to_code(fmt)
            for assoc in self.associated_tys:
                fmt.write(f"{KW_TYPE} {assoc.name} = ")
                assoc.ty.to_code(fmt)
                fmt.write(";\n")
            preceded = bool(self.associated_consts or self.associated_tys)
            _fmt_fns(self.fns, preceded, False, fmt)


# -----------------------------
# Aliases & raw text
# -----------------------------

@dataclass
class TypeAlias(_TypeDefBuilder):
    name: InitVar[str]
    target: Type
    type_def: TypeDef = field(init=False)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))
        self.target = as_type(self.target)

    def to_code(self, fmt: Formatter) -> None:
        self.type_def.fmt_head(KW_TYPE, [], fmt)
        fmt.write(" = ")
        self.target.to_code(fmt)
        fmt.write(";\n")


@dataclass
class Raw:
    text: str

    def to_code(self, fmt: Formatter) -> None:
        fmt.write(f"{self.text}\n")
