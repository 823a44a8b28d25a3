"""Strict Rust keywords used by the render drivers."""

from __future__ import annotations

KW_AS = "as"
KW_BREAK = "break"
KW_CONST = "const"
KW_CONTINUE = "continue"
KW_CRATE = "crate"
KW_ELSE = "else"
KW_ENUM = "enum"
KW_EXTERN = "extern"
KW_FALSE = "false"
KW_FN = "fn"
KW_FOR = "for"
KW_IF = "if"
KW_IMPL = "impl"
KW_IN = "in"
KW_LET = "let"
KW_LOOP = "loop"
KW_MATCH = "match"
KW_MOD = "mod"
KW_MOVE = "move"
KW_MUT = "mut"
KW_PUB = "pub"
KW_REF = "ref"
KW_RETURN = "return"
KW_SELFVALUE = "self"
KW_SELFTYPE = "Self"
KW_STATIC = "static"
KW_STRUCT = "struct"
KW_SUPER = "super"
KW_TRAIT = "trait"
KW_TRUE = "true"
KW_TYPE = "type"
KW_UNSAFE = "unsafe"
KW_USE = "use"
KW_WHERE = "where"
KW_WHILE = "while"

KEYWORDS_STRICT: tuple[str, ...] = (
    KW_AS, KW_BREAK, KW_CONST, KW_CONTINUE, KW_CRATE, KW_ELSE, KW_ENUM,
    KW_EXTERN, KW_FALSE, KW_FN, KW_FOR, KW_IF, KW_IMPL, KW_IN, KW_LET,
    KW_LOOP, KW_MATCH, KW_MOD, KW_MOVE, KW_MUT, KW_PUB, KW_REF, KW_RETURN,
    KW_SELFVALUE, KW_SELFTYPE, KW_STATIC, KW_STRUCT, KW_SUPER, KW_TRAIT,
    KW_TRUE, KW_TYPE, KW_UNSAFE, KW_USE, KW_WHERE, KW_WHILE,
)

_KEYWORD_SET = frozenset(KEYWORDS_STRICT)


def is_keyword(name: str) -> bool:
    return name in _KEYWORD_SET
