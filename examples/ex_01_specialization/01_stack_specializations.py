"""Stack specializations: primary, partial, full, deduction and ambiguity.

This module walks through the resolution outcomes of a small ``Stack`` generic:

1. Full specialization wins over the primary pattern.
2. Pointer partial specialization wins over the primary pattern.
3. Decay turns a character-sequence literal into a pointer.
4. A deduction guide overrides decay.
5. Capability-gated ``format`` operation.
6. Ambiguity between incomparable partial specializations.
7. Sealing after the first resolution.
"""

from __future__ import annotations

from typing import Any

from genwire import (
    ArrayOf,
    Catalog,
    DeductionGuide,
    GenWireAmbiguousResolutionError,
    GenWireCatalogSealedError,
    Leaf,
    Pattern,
    PointerTo,
    Qualified,
    Var,
)

FORMATTABLE = {Leaf("int"), Leaf("double"), Leaf("string")}


class Stack:
    def __init__(self) -> None:
        self._items: list[Any] = []

    def push(self, item: Any) -> None:
        self._items.append(item)

    def pop(self) -> Any:
        return self._items.pop()

    def top(self) -> Any:
        return self._items[-1]

    def format(self) -> str:
        return "[" + ", ".join(str(item) for item in self._items) + "]"


class PointerStack(Stack):
    pass


class StringStack(Stack):
    def format(self) -> str:
        return " | ".join(self._items)


def main() -> None:
    catalog = Catalog()
    catalog.register(
        "Stack",
        Pattern.of(Var("t")),
        Stack,
        capabilities={"format": lambda bindings: bindings[Var("t")] in FORMATTABLE},
    )
    catalog.register("Stack", Pattern.of(PointerTo(Var("t"))), PointerStack)
    catalog.register(
        "Stack",
        Pattern.of(Leaf("string")),
        StringStack,
        capabilities={"format": lambda _bindings: True},
    )

    int_bound = catalog.resolve("Stack", [Leaf("int")])
    print(f"int -> {int_bound.implementation.__name__}")  # => int -> Stack
    pointer_bound = catalog.resolve("Stack", [PointerTo(Leaf("int"))])
    print(f"int* -> {pointer_bound.implementation.__name__}")  # => int* -> PointerStack
    text_bound = catalog.resolve("Stack", [Leaf("string")])
    print(f"string -> {text_bound.implementation.__name__}")  # => string -> StringStack

    decayed = catalog.deduce_and_resolve("Stack", ["hello"])
    decayed_type = decayed.arguments[0]
    decayed_name = decayed.implementation.__name__
    decayed_line = f"'hello' as {decayed_type} -> {decayed_name}"
    print(decayed_line)  # => 'hello' as const char* -> PointerStack

    literal_guide = DeductionGuide(
        value_shape=Pattern.of(ArrayOf(Qualified(Leaf("char")), Var("n"))),
        forced=(Leaf("string"),),
    )
    guided = catalog.deduce_and_resolve("Stack", ["hello"], guides=[literal_guide])
    guided_name = guided.implementation.__name__
    print(f"'hello' with guide -> {guided_name}")  # => 'hello' with guide -> StringStack

    int_stack_bound = catalog.resolve("Stack", [Leaf("int")])
    int_stack = int_stack_bound.implementation()
    for value in (1, 2, 3):
        int_stack.push(value)
    if int_stack_bound.has_capability("format"):
        print(int_stack.format())  # => [1, 2, 3]
    formattable = decayed.has_capability("format")
    print(f"{decayed_type} formattable={formattable}")  # => const char* formattable=False

    catalog.register("Pair", Pattern.of(Var("a"), Var("b")), "pair")
    catalog.register("Pair", Pattern.of(Leaf("int"), Var("b")), "int-first pair")
    catalog.register("Pair", Pattern.of(Var("a"), Var("a")), "same-type pair")
    try:
        catalog.resolve("Pair", [Leaf("int"), Leaf("int")])
    except GenWireAmbiguousResolutionError as error:
        tied = ", ".join(f"#{candidate.declared_order}" for candidate in error.tied_candidates)
        print(f"ambiguous: {tied}")  # => ambiguous: #2, #3

    try:
        catalog.register("Stack", Pattern.of(Leaf("bool")), Stack)
    except GenWireCatalogSealedError:
        print(f"sealed: {catalog.is_sealed('Stack')}")  # => sealed: True


if __name__ == "__main__":
    main()
