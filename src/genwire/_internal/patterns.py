from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from genwire._internal.descriptors import (
    ArrayOf,
    Bindings,
    FunctionOf,
    Leaf,
    PointerTo,
    Qualified,
    ReferenceTo,
    TypeDescriptor,
    Var,
    format_arguments,
    is_descriptor,
    iter_vars,
)


class PatternKind(str, Enum):
    """Classify a pattern by how much of the argument space it accepts."""

    PRIMARY = "primary"
    """Every slot is a bare, distinct variable; the pattern matches anything."""

    PARTIAL = "partial"
    """Some structure is fixed while some variables remain."""

    FULL = "full"
    """No variables at all; the pattern matches exactly one argument list."""


@dataclass(frozen=True, slots=True)
class Pattern:
    """Describe the shape of argument lists a candidate accepts.

    Slots are matched positionally. The same ``Var`` appearing in several slots
    must bind to the same concrete descriptor.

    Examples:
        .. code-block:: python

            primary = Pattern.of(Var("a"))
            pointer = Pattern.of(PointerTo(Var("a")))
            text = Pattern.of(Leaf("text"))

    """

    slots: tuple[TypeDescriptor, ...]

    def __post_init__(self) -> None:
        for slot in self.slots:
            if not is_descriptor(slot):
                msg = f"Pattern slots must be type descriptors, got {slot!r}."
                raise TypeError(msg)

    @classmethod
    def of(cls, *slots: TypeDescriptor) -> Pattern:
        """Build a pattern from positional slots."""
        return cls(tuple(slots))

    @property
    def arity(self) -> int:
        """Return the number of slots."""
        return len(self.slots)

    @property
    def kind(self) -> PatternKind:
        """Return whether this is the primary, a partial, or a full pattern."""
        occurrences = [var for slot in self.slots for var in iter_vars(slot)]
        if not occurrences:
            return PatternKind.FULL
        all_bare = all(isinstance(slot, Var) for slot in self.slots)
        if all_bare and len(set(occurrences)) == len(occurrences):
            return PatternKind.PRIMARY
        return PatternKind.PARTIAL

    def canonical(self) -> Pattern:
        """Return the pattern with variables renamed by first occurrence.

        Alpha-equivalent patterns such as ``[Var("a")]`` and ``[Var("b")]``
        share one canonical form.
        """
        renames: dict[Var, Var] = {}
        for slot in self.slots:
            for var in iter_vars(slot):
                if var not in renames:
                    renames[var] = Var(f"_{len(renames)}")
        return Pattern(tuple(_rename(slot, renames) for slot in self.slots))

    def __str__(self) -> str:
        return format_arguments(self.slots)


def unify(
    pattern_slot: TypeDescriptor | int,
    concrete: TypeDescriptor | int,
    bindings: Bindings,
) -> dict[Var, TypeDescriptor | int] | None:
    """Structurally match one pattern slot against a descriptor.

    ``bindings`` is never mutated; a new mapping is returned on success.

    Args:
        pattern_slot: Slot that may contain variables.
        concrete: Descriptor to match against.
        bindings: Variable bindings accumulated so far.

    Returns:
        Extended bindings on success, ``None`` on failure.

    """
    mapping = dict(bindings)
    if _unify_into(template=pattern_slot, target=concrete, mapping=mapping):
        return mapping
    return None


def match(
    pattern: Pattern,
    arguments: Iterable[TypeDescriptor],
) -> dict[Var, TypeDescriptor | int] | None:
    """Match ``pattern`` against an argument list slot by slot.

    Args:
        pattern: Candidate pattern.
        arguments: Argument list of the same arity.

    Returns:
        Variable bindings on success, ``None`` on arity mismatch or the first
        slot that fails to unify.

    """
    arguments = tuple(arguments)
    if len(arguments) != pattern.arity:
        return None
    mapping: dict[Var, TypeDescriptor | int] = {}
    for slot, argument in zip(pattern.slots, arguments, strict=True):
        if not _unify_into(template=slot, target=argument, mapping=mapping):
            return None
    return mapping


def subsumes(general: Pattern, specific: Pattern) -> bool:
    """Return whether every argument list matching ``specific`` also matches ``general``.

    Variables of ``specific`` are treated as rigid, opaque types: ``general``
    subsumes ``specific`` exactly when some substitution of ``general``'s own
    variables turns it into ``specific``.

    Args:
        general: Pattern expected to be at least as generic.
        specific: Pattern expected to be at least as specific.

    """
    return match(general, specific.slots) is not None


def is_more_specific(left: Pattern, right: Pattern) -> bool:
    """Return whether ``left`` accepts a strict subset of what ``right`` accepts."""
    return subsumes(right, left) and not subsumes(left, right)


def _unify_into(  # noqa: PLR0911
    *,
    template: TypeDescriptor | int,
    target: TypeDescriptor | int,
    mapping: dict[Var, TypeDescriptor | int],
) -> bool:
    if isinstance(template, Var):
        known = mapping.get(template)
        if known is None:
            mapping[template] = target
            return True
        return known == target

    if isinstance(template, (int, Leaf)):
        return type(template) is type(target) and template == target

    if isinstance(template, (PointerTo, ReferenceTo)):
        if type(template) is not type(target):
            return False
        return _unify_into(template=template.inner, target=target.inner, mapping=mapping)

    if isinstance(template, Qualified):
        if not isinstance(target, Qualified):
            return False
        if (template.const, template.volatile) != (target.const, target.volatile):
            return False
        return _unify_into(template=template.inner, target=target.inner, mapping=mapping)

    if isinstance(template, ArrayOf):
        if not isinstance(target, ArrayOf):
            return False
        return _unify_into(
            template=template.length,
            target=target.length,
            mapping=mapping,
        ) and _unify_into(template=template.element, target=target.element, mapping=mapping)

    if isinstance(template, FunctionOf):
        if not isinstance(target, FunctionOf):
            return False
        if len(template.parameters) != len(target.parameters):
            return False
        return all(
            _unify_into(template=template_parameter, target=target_parameter, mapping=mapping)
            for template_parameter, target_parameter in zip(
                template.parameters,
                target.parameters,
                strict=True,
            )
        ) and _unify_into(template=template.result, target=target.result, mapping=mapping)

    return False


def _rename(value: TypeDescriptor | int, renames: Mapping[Var, Var]) -> TypeDescriptor | int:
    if isinstance(value, Var):
        return renames[value]
    if isinstance(value, PointerTo):
        return PointerTo(_rename(value.inner, renames))
    if isinstance(value, ReferenceTo):
        return ReferenceTo(_rename(value.inner, renames))
    if isinstance(value, Qualified):
        return Qualified(_rename(value.inner, renames), const=value.const, volatile=value.volatile)
    if isinstance(value, ArrayOf):
        return ArrayOf(_rename(value.element, renames), _rename(value.length, renames))
    if isinstance(value, FunctionOf):
        return FunctionOf(
            tuple(_rename(parameter, renames) for parameter in value.parameters),
            _rename(value.result, renames),
        )
    return value


__all__ = [
    "Pattern",
    "PatternKind",
    "is_more_specific",
    "match",
    "subsumes",
    "unify",
]
