from hypothesis import given, strategies as st

from rscodegen import Field, Scope, Struct


def test_empty_scope() -> None:
    scope: Scope = Scope()
    assert scope.to_code() == ""


def test_single_struct() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").field("one", "usize").field("two", "String")

    expect = """\
struct Foo {
    one: usize,
    two: String,
}"""
    assert scope.to_code() == expect


def test_struct_with_pushed_field() -> None:
    scope: Scope = Scope()
    struct_: Struct = Struct("Foo")
    struct_.push_field(Field("one", "usize"))
    scope.push_struct(struct_)

    assert scope.to_code() == "struct Foo {\n    one: usize,\n}"


def test_empty_struct() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo")
    assert scope.to_code() == "struct Foo;"


def test_two_structs() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").field("one", "usize").field("two", "String")
    scope.new_struct("Bar").field("hello", "World")

    expect = """\
struct Foo {
    one: usize,
    two: String,
}

struct Bar {
    hello: World,
}"""
    assert scope.to_code() == expect


def test_struct_with_derive() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").derive("Debug").derive("Clone").field("one", "usize").field("two", "String")

    expect = """\
#[derive(Debug, Clone)]
struct Foo {
    one: usize,
    two: String,
}"""
    assert scope.to_code() == expect


def test_struct_with_generics_1() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").generic("T").generic("U").field("one", "T").field("two", "U")

    assert scope.to_code() == "struct Foo<T, U> {\n    one: T,\n    two: U,\n}"


def test_struct_with_generics_2() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").generic("T, U").field("one", "T").field("two", "U")

    assert scope.to_code() == "struct Foo<T, U> {\n    one: T,\n    two: U,\n}"


def test_struct_with_generics_3() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").generic("T: Win, U").field("one", "T").field("two", "U")

    assert scope.to_code() == "struct Foo<T: Win, U> {\n    one: T,\n    two: U,\n}"


def test_struct_where_clause_1() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").generic("T").bound("T", "Foo").field("one", "T")

    expect = """\
struct Foo<T>
where T: Foo,
{
    one: T,
}"""
    assert scope.to_code() == expect


def test_struct_where_clause_2() -> None:
    scope: Scope = Scope()
    (
        scope.new_struct("Foo")
        .generic("T, U")
        .bound("T", "Foo")
        .bound("U", "Baz")
        .field("one", "T")
        .field("two", "U")
    )

    expect = """\
struct Foo<T, U>
where T: Foo,
      U: Baz,
{
    one: T,
    two: U,
}"""
    assert scope.to_code() == expect


def test_struct_doc() -> None:
    scope: Scope = Scope()
    scope.new_struct("Foo").doc(
        "Hello, this is a doc string\nthat continues on another line."
    ).field("one", "T")

    expect = """\
/// Hello, this is a doc string
/// that continues on another line.
struct Foo {
    one: T,
}"""
    assert scope.to_code() == expect


def test_struct_in_mod() -> None:
    scope: Scope = Scope()
    module = scope.new_module("foo")
    (
        module.new_struct("Foo")
        .doc("Hello some docs")
        .derive("Debug")
        .generic("T, U")
        .bound("T", "SomeBound")
        .bound("U", "SomeOtherBound")
        .field("one", "T")
        .field("two", "U")
    )

    expect = """\
mod foo {
    /// Hello some docs
    #[derive(Debug)]
    struct Foo<T, U>
    where T: SomeBound,
          U: SomeOtherBound,
    {
        one: T,
        two: U,
    }
}"""
    assert scope.to_code() == expect


def test_struct_mod_import() -> None:
    scope: Scope = Scope()
    scope.new_module("foo").import_("bar", "Bar").new_struct("Foo").field("bar", "Bar")

    expect = """\
mod foo {
    use bar::Bar;

    struct Foo {
        bar: Bar,
    }
}"""
    assert scope.to_code() == expect


def test_import_grouping_uses_first_segment() -> None:
    scope: Scope = Scope()
    scope.import_("bar", "Bar")
    scope.import_("bar", "baz::Baz")
    assert scope.to_code() == "use bar::{Bar, baz};\n"


# -----------------------------
# Properties
# -----------------------------

_IDENTS = st.sampled_from(["alpha", "beta", "gamma", "delta", "epsilon"])


@given(st.lists(_IDENTS, min_size=1, max_size=5, unique=True))
def test_render_is_deterministic(names: list[str]) -> None:
    scope: Scope = Scope()
    s: Struct = scope.new_struct("Foo")
    for name in names:
        s.field(name, "usize")

    first: str = scope.to_code()
    assert first == scope.to_code()
    lines: list[str] = first.splitlines()
    assert lines[0] == "struct Foo {"
    assert lines[1:-1] == [f"    {name}: usize," for name in names]
    assert lines[-1] == "}"


@given(st.integers(min_value=0, max_value=5))
def test_nested_modules_indent_by_depth(depth: int) -> None:
    scope: Scope = Scope()
    parent = scope
    for level in range(depth):
        parent = parent.new_module(f"m{level}")
    parent.new_struct("Foo").field("one", "usize")

    pad = "    "
    expect: list[str] = [f"{pad * level}mod m{level} {{" for level in range(depth)]
    expect += [f"{pad * depth}struct Foo {{", f"{pad * (depth + 1)}one: usize,", f"{pad * depth}}}"]
    expect += [f"{pad * level}}}" for level in reversed(range(depth))]
    assert scope.to_code() == "\n".join(expect)


@given(st.lists(st.tuples(st.sampled_from(["std::fmt", "bar", "crate::a"]), st.sampled_from(["Foo", "Bar", "Baz"]))))
def test_imports_are_idempotent(requests: list[tuple[str, str]]) -> None:
    scope: Scope = Scope()
    for path, name in requests:
        scope.import_(path, name)
        scope.import_(path, name)

    lines: list[str] = [ln for ln in scope.to_code().splitlines() if ln]
    assert len(lines) == len({path for path, _ in requests})
    for path, name in set(requests):
        matching = [ln for ln in lines if ln.startswith(f"use {path}::")]
        assert len(matching) == 1
        names = matching[0][len(f"use {path}::"):].rstrip(";").strip("{}").split(", ")
        assert names.count(name) == 1
