from __future__ import annotations

import pytest

from genwire import ArrayOf, FunctionOf, Leaf, PointerTo, Qualified, ReferenceTo, Var
from genwire._internal.descriptors import (
    contains_var,
    format_arguments,
    is_descriptor,
    iter_vars,
    substitute,
)

INT = Leaf("int")
T = Var("t")
N = Var("n")


def test_descriptors_are_hashable_values() -> None:
    assert {PointerTo(INT), PointerTo(Leaf("int"))} == {PointerTo(INT)}
    assert ArrayOf(INT, 6) != ArrayOf(INT, 10)
    assert Qualified(INT) != Qualified(INT, const=False, volatile=True)


def test_iter_vars_yields_every_occurrence_in_order() -> None:
    descriptor = FunctionOf((T, ArrayOf(Var("e"), N)), PointerTo(T))

    assert list(iter_vars(descriptor)) == [T, Var("e"), N, T]


def test_contains_var_walks_nested_descriptors() -> None:
    assert contains_var(ReferenceTo(Qualified(PointerTo(T))))
    assert contains_var(ArrayOf(INT, N))
    assert not contains_var(ArrayOf(INT, 3))
    assert not contains_var(FunctionOf((INT,), Leaf("void")))


def test_substitute_replaces_bound_and_keeps_unbound_vars() -> None:
    template = FunctionOf((PointerTo(T), ArrayOf(T, N)), Var("r"))

    substituted = substitute(template, bindings={T: INT, N: 4})

    assert substituted == FunctionOf((PointerTo(INT), ArrayOf(INT, 4)), Var("r"))


def test_substitute_rejects_type_bound_to_array_length() -> None:
    with pytest.raises(TypeError, match="not a length"):
        substitute(ArrayOf(INT, N), bindings={N: INT})


def test_substitute_rejects_length_bound_to_type_position() -> None:
    with pytest.raises(TypeError, match="not a type"):
        substitute(PointerTo(T), bindings={T: 3})


def test_is_descriptor_accepts_only_descriptor_variants() -> None:
    assert is_descriptor(INT)
    assert is_descriptor(T)
    assert not is_descriptor("int")
    assert not is_descriptor(int)


@pytest.mark.parametrize(
    ("descriptor", "rendered"),
    [
        (PointerTo(PointerTo(INT)), "int**"),
        (Qualified(ArrayOf(Leaf("char"), 6)), "const char[6]"),
        (ReferenceTo(INT), "int&"),
        (FunctionOf((INT, Leaf("double")), Leaf("void")), "void(int, double)"),
        (Var("t"), "?t"),
    ],
)
def test_descriptor_str(descriptor: object, rendered: str) -> None:
    assert str(descriptor) == rendered


def test_format_arguments() -> None:
    assert format_arguments((INT, PointerTo(INT))) == "<int, int*>"
