"""Simple profiling of scope construction and rendering."""

from __future__ import annotations

import timeit
import tracemalloc

from rscodegen import Scope


def _build_scope(n: int) -> Scope:
    scope: Scope = Scope()
    for i in range(n):
        scope.import_("std::collections", f"Map{i % 7}")
        scope.new_struct(f"Foo{i}").derive("Debug").generic("T").bound("T", "Clone").field("one", "T")
        imp = scope.new_impl(f"Foo{i}").generic("T").target_generic("T")
        imp.new_fn("one").arg_ref_self().ret("&T").line("&self.one")
    return scope


def main() -> None:
    def _construct() -> None:
        _build_scope(10)

    duration: float = timeit.timeit(_construct, number=1000)
    print(f"Scope construction (10 items): {duration:.4f}s/1000")

    scope: Scope = _build_scope(200)
    render: float = timeit.timeit(scope.to_code, number=100)
    print(f"Scope.to_code() (200 items): {render:.4f}s/100")

    tracemalloc.start()
    _build_scope(500).to_code()
    current: int
    peak: int
    current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    print(f"Large scope memory: current={current} bytes peak={peak} bytes")


if __name__ == "__main__":
    main()
