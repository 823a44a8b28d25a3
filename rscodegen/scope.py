from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from .errors import DuplicateModuleError
from .formatter import Formatter
from .keywords import KW_MOD, KW_USE
from .model import Docs, Enum, Function, Impl, Raw, Struct, Trait, Type, TypeAlias

logger = logging.getLogger(__name__)


@dataclass
class Import:
    """A single ``use`` request; consolidated with its siblings at render time."""
    path: str
    name: str
    visibility: str | None = None

    @property
    def line(self) -> str:
        return f"{self.path}::{self.name}"

    def vis(self, visibility: str) -> Import:
        self.visibility = visibility
        return self


@dataclass
class Scope:
    """
    Top-level container of declarations.

    Build the tree through the ``new_*``/``push_*`` methods, then call
    :meth:`to_code` to get the rendered source.
    """
    imports: dict[str, dict[str, Import]] = field(default_factory=dict)
    items: list[Item] = field(default_factory=list)

    # ----------- imports ------------

    def import_(self, path: str, ty: str) -> Import:
        """
        Bring ``ty`` from ``path`` into view, returning the import entry.

        Requesting the same pair twice returns the existing entry. A name
        given as a path (``"a::B"``) imports its first segment (``a``).
        """
        name = ty.split("::", 1)[0]
        entries = self.imports.setdefault(path, {})
        existing = entries.get(name)
        if existing is not None:
            logger.debug("Import %s::%s already requested.", path, name)
            return existing
        imp = Import(path, name)
        entries[name] = imp
        return imp

    # ----------- modules ------------

    def get_module(self, name: str) -> Module | None:
        for item in self.items:
            if isinstance(item, Module) and item.name == name:
                return item
        return None

    def new_module(self, name: str) -> Module:
        module = Module(name)
        self.push_module(module)
        return module

    def get_or_new_module(self, name: str) -> Module:
        module = self.get_module(name)
        if module is None:
            logger.debug("Creating module %s.", name)
            return self.new_module(name)
        return module

    def push_module(self, module: Module) -> Scope:
        """Add a module; raises :class:`DuplicateModuleError` if the name is taken."""
        if self.get_module(module.name) is not None:
            raise DuplicateModuleError(f"module `{module.name}` is already defined in this scope")
        self.items.append(module)
        return self

    # ----------- items ------------

    def new_struct(self, name: str) -> Struct:
        item = Struct(name)
        self.items.append(item)
        return item

    def push_struct(self, item: Struct) -> Scope:
        self.items.append(item)
        return self

    def new_fn(self, name: str) -> Function:
        item = Function(name)
        self.items.append(item)
        return item

    def push_fn(self, item: Function) -> Scope:
        self.items.append(item)
        return self

    def new_trait(self, name: str) -> Trait:
        item = Trait(name)
        self.items.append(item)
        return item

    def push_trait(self, item: Trait) -> Scope:
        self.items.append(item)
        return self

    def new_enum(self, name: str) -> Enum:
        item = Enum(name)
        self.items.append(item)
        return item

    def push_enum(self, item: Enum) -> Scope:
        self.items.append(item)
        return self

    def new_impl(self, target: Type | str) -> Impl:
        item = Impl(target)
        self.items.append(item)
        return item

    def push_impl(self, item: Impl) -> Scope:
        self.items.append(item)
        return self

    def new_type_alias(self, name: str, target: Type | str) -> TypeAlias:
        item = TypeAlias(name, target)
        self.items.append(item)
        return item

    def push_type_alias(self, item: TypeAlias) -> Scope:
        self.items.append(item)
        return self

    def raw(self, text: str) -> Scope:
        """Add text that is emitted verbatim."""
        self.items.append(Raw(text))
        return self

    # ----------- codegen ------------

    def to_code(self) -> str:
        fmt = Formatter()
        self.render(fmt)
        code = fmt.getvalue()
        if code.endswith("\n"):
            code = code[:-1]
        logger.debug("Rendered scope with %d items.", len(self.items))
        return code

    def render(self, fmt: Formatter) -> None:
        self._fmt_imports(fmt)
        if self.imports:
            fmt.write("\n")

        for i, item in enumerate(self.items):
            if i:
                fmt.write("\n")
            item.to_code(fmt)

    def _fmt_imports(self, fmt: Formatter) -> None:
        # one line per (visibility, path), visibilities in first-seen order
        visibilities: list[str | None] = []
        for entries in self.imports.values():
            for imp in entries.values():
                if imp.visibility not in visibilities:
                    visibilities.append(imp.visibility)

        for vis in visibilities:
            for path, entries in self.imports.items():
                names = [name for name, imp in entries.items() if imp.visibility == vis]
                if not names:
                    continue
                if vis:
                    fmt.write(f"{vis} ")
                if len(names) > 1:
                    fmt.write(f"{KW_USE} {path}::{{{', '.join(names)}}};\n")
                else:
                    fmt.write(f"{KW_USE} {entries[names[0]].line};\n")


@dataclass
class Module:
    name: str
    visibility: str | None = None
    docs: Docs | None = None
    scope: Scope = field(default_factory=Scope)

    def vis(self, visibility: str) -> Module:
        self.visibility = visibility
        return self

    def doc(self, docs: str) -> Module:
        self.docs = Docs(docs)
        return self

    def import_(self, path: str, ty: str) -> Module:
        self.scope.import_(path, ty)
        return self

    def new_module(self, name: str) -> Module:
        return self.scope.new_module(name)

    def get_module(self, name: str) -> Module | None:
        return self.scope.get_module(name)

    def get_or_new_module(self, name: str) -> Module:
        return self.scope.get_or_new_module(name)

    def push_module(self, module: Module) -> Module:
        self.scope.push_module(module)
        return self

    def new_struct(self, name: str) -> Struct:
        return self.scope.new_struct(name)

    def push_struct(self, item: Struct) -> Module:
        self.scope.push_struct(item)
        return self

    def new_fn(self, name: str) -> Function:
        return self.scope.new_fn(name)

    def push_fn(self, item: Function) -> Module:
        self.scope.push_fn(item)
        return self

    def new_trait(self, name: str) -> Trait:
        return self.scope.new_trait(name)

    def push_trait(self, item: Trait) -> Module:
        self.scope.push_trait(item)
        return self

    def new_enum(self, name: str) -> Enum:
        return self.scope.new_enum(name)

    def push_enum(self, item: Enum) -> Module:
        self.scope.push_enum(item)
        return self

    def new_impl(self, target: Type | str) -> Impl:
        return self.scope.new_impl(target)

    def push_impl(self, item: Impl) -> Module:
        self.scope.push_impl(item)
        return self

    def new_type_alias(self, name: str, target: Type | str) -> TypeAlias:
        return self.scope.new_type_alias(name, target)

    def push_type_alias(self, item: TypeAlias) -> Module:
        self.scope.push_type_alias(item)
        return self

    def raw(self, text: str) -> Module:
        self.scope.raw(text)
        return self

    def to_code(self, fmt: Formatter) -> None:
        if self.docs is not None:
            self.docs.to_code(fmt)
        if self.visibility:
            fmt.write(f"{self.visibility} ")
        fmt.write(f"{KW_MOD} {self.name}")
        with fmt.block():
            self.scope.render(fmt)


Item = Union[Module, Struct, Function, Trait, Enum, Impl, TypeAlias, Raw]
