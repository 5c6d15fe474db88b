from __future__ import annotations

import pytest

from genwire import ArrayOf, FunctionOf, Leaf, Pattern, PatternKind, PointerTo, Qualified, Var
from genwire._internal.patterns import is_more_specific, match, subsumes, unify

INT = Leaf("int")
BOOL = Leaf("bool")
A = Var("a")
B = Var("b")


def test_leaf_unifies_only_with_equal_leaf() -> None:
    assert unify(INT, INT, {}) == {}
    assert unify(INT, BOOL, {}) is None
    assert unify(INT, PointerTo(INT), {}) is None


def test_pointer_recurses_and_rejects_non_pointer_leaf() -> None:
    assert unify(PointerTo(A), PointerTo(INT), {}) == {A: INT}
    assert unify(PointerTo(A), INT, {}) is None
    assert unify(PointerTo(PointerTo(A)), PointerTo(INT), {}) is None


def test_var_binds_once_and_then_requires_equal_descriptor() -> None:
    assert unify(A, INT, {A: INT}) == {A: INT}
    assert unify(A, BOOL, {A: INT}) is None


def test_unify_does_not_mutate_input_bindings() -> None:
    bindings = {B: BOOL}

    extended = unify(A, INT, bindings)

    assert extended == {A: INT, B: BOOL}
    assert bindings == {B: BOOL}


def test_match_folds_slots_left_to_right_with_repeated_vars() -> None:
    pattern = Pattern.of(A, A)

    assert match(pattern, [INT, INT]) == {A: INT}
    assert match(pattern, [INT, BOOL]) is None


def test_match_fails_on_arity_mismatch() -> None:
    assert match(Pattern.of(A), [BOOL, BOOL]) is None
    assert match(Pattern.of(A, B), [BOOL]) is None


def test_compound_descriptors_unify_structurally() -> None:
    array_pattern = Pattern.of(ArrayOf(A, Var("n")))
    function_pattern = Pattern.of(FunctionOf((A,), A))
    const_pattern = Pattern.of(Qualified(A))

    assert match(array_pattern, [ArrayOf(Leaf("char"), 6)]) == {A: Leaf("char"), Var("n"): 6}
    assert match(Pattern.of(ArrayOf(A, 6)), [ArrayOf(INT, 10)]) is None
    assert match(function_pattern, [FunctionOf((INT,), INT)]) == {A: INT}
    assert match(function_pattern, [FunctionOf((INT,), BOOL)]) is None
    assert match(function_pattern, [FunctionOf((INT, INT), INT)]) is None
    assert match(const_pattern, [Qualified(INT)]) == {A: INT}
    assert match(const_pattern, [Qualified(INT, const=False, volatile=True)]) is None
    assert match(const_pattern, [INT]) is None


@pytest.mark.parametrize(
    ("pattern", "kind"),
    [
        (Pattern.of(A), PatternKind.PRIMARY),
        (Pattern.of(A, B), PatternKind.PRIMARY),
        (Pattern.of(A, A), PatternKind.PARTIAL),
        (Pattern.of(PointerTo(A)), PatternKind.PARTIAL),
        (Pattern.of(INT, A), PatternKind.PARTIAL),
        (Pattern.of(INT), PatternKind.FULL),
        (Pattern.of(PointerTo(INT), BOOL), PatternKind.FULL),
    ],
)
def test_pattern_kind_classification(pattern: Pattern, kind: PatternKind) -> None:
    assert pattern.kind is kind


def test_canonical_form_renames_vars_by_first_occurrence() -> None:
    assert Pattern.of(A, PointerTo(B)).canonical() == Pattern.of(B, PointerTo(A)).canonical()
    assert Pattern.of(A, A).canonical() != Pattern.of(A, B).canonical()


def test_pattern_rejects_non_descriptor_slots() -> None:
    with pytest.raises(TypeError, match="type descriptors"):
        Pattern.of("int")  # type: ignore[arg-type]


def test_pattern_str_lists_slots() -> None:
    assert str(Pattern.of(PointerTo(A), INT)) == "<?a*, int>"


def test_subsumes_treats_specific_vars_as_rigid() -> None:
    assert subsumes(Pattern.of(A, B), Pattern.of(A, A))
    assert not subsumes(Pattern.of(A, A), Pattern.of(A, B))
    assert subsumes(Pattern.of(A), Pattern.of(A))


def test_full_specialization_beats_var_patterns() -> None:
    full = Pattern.of(PointerTo(INT))

    assert is_more_specific(full, Pattern.of(A))
    assert is_more_specific(full, Pattern.of(PointerTo(A)))


def test_pointer_slot_beats_bare_var_slot() -> None:
    assert is_more_specific(Pattern.of(PointerTo(A), B), Pattern.of(A, B))
    assert not is_more_specific(Pattern.of(A, B), Pattern.of(PointerTo(A), B))


def test_repeated_var_beats_distinct_vars() -> None:
    assert is_more_specific(Pattern.of(A, A), Pattern.of(A, B))


def test_leaf_and_var_beats_two_vars_but_is_incomparable_with_repeated_var() -> None:
    leaf_first = Pattern.of(INT, B)
    repeated = Pattern.of(A, A)

    assert is_more_specific(leaf_first, Pattern.of(A, B))
    assert not is_more_specific(leaf_first, repeated)
    assert not is_more_specific(repeated, leaf_first)


def test_primary_pattern_is_dominated_by_every_other_pattern() -> None:
    primary = Pattern.of(A, B)
    others = [
        Pattern.of(A, A),
        Pattern.of(INT, B),
        Pattern.of(PointerTo(A), B),
        Pattern.of(INT, BOOL),
    ]

    for other in others:
        assert is_more_specific(other, primary)
        assert not is_more_specific(primary, other)


def test_alpha_equivalent_patterns_are_not_more_specific_than_each_other() -> None:
    assert not is_more_specific(Pattern.of(A), Pattern.of(B))
