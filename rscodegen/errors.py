from __future__ import annotations


class CodegenError(Exception):
    """Base error for malformed declaration trees."""


class FieldShapeError(CodegenError):
    """A field push disagrees with the shape the field list already has."""


class ContractViolation(CodegenError):
    """A node was configured or rendered in a way the grammar does not allow."""


class DuplicateModuleError(CodegenError):
    """A module with the same name already exists in the scope."""
