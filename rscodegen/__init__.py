"""Builder API for generating Rust source code.

1. Create a :class:`Scope`.
2. Add declarations through its ``new_*``/``push_*`` methods.
3. Call :meth:`Scope.to_code` to get the rendered source.
"""

from .errors import CodegenError, ContractViolation, DuplicateModuleError, FieldShapeError
from .formatter import DEFAULT_INDENT, Formatter, fmt_bound_rhs, fmt_bounds, fmt_generics
from .keywords import KEYWORDS_STRICT, is_keyword
from .model import (
    AssociatedConst, AssociatedType, Block, Bound, Docs, Enum, Field, Fields, FieldsShape,
    Function, Impl, Raw, Struct, Trait, Type, TypeAlias, TypeDef, Variant, as_type,
)
from .scope import Import, Item, Module, Scope

__all__ = [
    # scope
    "Scope", "Module", "Import", "Item",
    # declarations
    "Struct", "Enum", "Variant", "Field", "Fields", "FieldsShape", "Trait", "Impl",
    "Function", "Block", "TypeAlias", "Raw", "AssociatedConst", "AssociatedType",
    "Type", "Bound", "Docs", "TypeDef", "as_type",
    # formatting
    "Formatter", "DEFAULT_INDENT", "fmt_generics", "fmt_bounds", "fmt_bound_rhs",
    # errors
    "CodegenError", "FieldShapeError", "ContractViolation", "DuplicateModuleError",
    # keywords
    "KEYWORDS_STRICT", "is_keyword",
]
