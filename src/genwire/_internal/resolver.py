from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from genwire._internal.descriptors import (
    TypeDescriptor,
    Var,
    contains_var,
    format_arguments,
    is_descriptor,
)
from genwire._internal.patterns import is_more_specific, match
from genwire.exceptions import (
    GenWireAmbiguousResolutionError,
    GenWireCapabilityUnavailableError,
    GenWireInvalidTypeArgumentError,
    GenWireNoMatchError,
)

if TYPE_CHECKING:
    from genwire._internal.catalog import Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoundImplementation:
    """Carry the candidate selected for one instantiation request.

    ``bindings`` is a read-only view mapping every variable of the winning
    pattern to the concrete descriptor (or array length) it matched. Optional
    operations are gated by the candidate's capability predicates, evaluated
    against these bindings.

    Examples:
        .. code-block:: python

            bound = catalog.resolve("Stack", [Leaf("int")])
            stack = bound.implementation()
            if bound.has_capability("format"):
                print(stack.format())

    """

    candidate: Candidate
    bindings: Mapping[Var, TypeDescriptor | int]
    arguments: tuple[TypeDescriptor, ...]

    @property
    def implementation(self) -> Any:
        """Return the implementation handle registered with the winning candidate."""
        return self.candidate.implementation

    def has_capability(self, capability_id: str) -> bool:
        """Return whether an optional operation is usable for the bound types.

        Args:
            capability_id: Capability name declared at registration.

        Returns:
            ``False`` when the candidate declares no such capability or its
            predicate rejects the bindings, else ``True``.

        """
        predicate = self.candidate.capabilities.get(capability_id)
        if predicate is None:
            return False
        return bool(predicate(self.bindings))

    def require_capability(self, capability_id: str) -> None:
        """Assert that an optional operation is usable for the bound types.

        Args:
            capability_id: Capability name declared at registration.

        Raises:
            GenWireCapabilityUnavailableError: If ``has_capability`` is false.

        """
        if not self.has_capability(capability_id):
            msg = (
                f"Capability '{capability_id}' is not available for "
                f"{self.candidate.name}{format_arguments(self.arguments)} "
                f"(candidate #{self.candidate.declared_order} {self.candidate.pattern})."
            )
            raise GenWireCapabilityUnavailableError(msg)


def validate_concrete_arguments(name: str, arguments: Sequence[Any]) -> None:
    """Reject argument lists that are not fully concrete type descriptors.

    Args:
        name: Generic name, used in the error message.
        arguments: Requested type arguments.

    Raises:
        GenWireInvalidTypeArgumentError: If an argument is not a descriptor or
            still contains a ``Var``.

    """
    for position, argument in enumerate(arguments):
        if not is_descriptor(argument):
            msg = f"Type argument {position} of '{name}' is not a type descriptor: {argument!r}."
            raise GenWireInvalidTypeArgumentError(msg)
        if contains_var(argument):
            msg = f"Type argument {position} of '{name}' contains a free variable: {argument}."
            raise GenWireInvalidTypeArgumentError(msg)


def resolve_candidates(
    *,
    name: str,
    candidates: Sequence[Candidate],
    arguments: Sequence[TypeDescriptor],
) -> BoundImplementation:
    """Select the unique most specific candidate matching ``arguments``.

    A candidate is more specific than another when its pattern accepts a strict
    subset of the argument lists the other accepts. The maximal matching
    candidates under that order are computed; exactly one must remain.

    Args:
        name: Generic name, used in error messages.
        candidates: Candidates in declaration order.
        arguments: Concrete type arguments.

    Returns:
        The winning candidate bound to its unification results.

    Raises:
        GenWireInvalidTypeArgumentError: If ``arguments`` is not concrete.
        GenWireNoMatchError: If no candidate pattern matches.
        GenWireAmbiguousResolutionError: If several maximal candidates remain.

    """
    arguments = tuple(arguments)
    validate_concrete_arguments(name, arguments)

    matches: list[tuple[Candidate, dict[Var, TypeDescriptor | int]]] = []
    for candidate in candidates:
        bindings = match(candidate.pattern, arguments)
        if bindings is not None:
            matches.append((candidate, bindings))

    if not matches:
        registered = ", ".join(str(candidate.pattern) for candidate in candidates) or "<none>"
        msg = (
            f"No candidate of '{name}' matches {format_arguments(arguments)}. "
            f"Registered patterns: {registered}."
        )
        raise GenWireNoMatchError(msg)

    maximal = [
        (candidate, bindings)
        for candidate, bindings in matches
        if not any(
            is_more_specific(other.pattern, candidate.pattern)
            for other, _ in matches
            if other is not candidate
        )
    ]
    maximal.sort(key=lambda item: item[0].declared_order)

    if len(maximal) > 1:
        tied = tuple(candidate for candidate, _ in maximal)
        listing = "\n".join(
            f"* #{candidate.declared_order} {candidate.pattern} -> {candidate.implementation!r}"
            for candidate in tied
        )
        msg = (
            f"Ambiguous resolution of '{name}' for {format_arguments(arguments)}: "
            f"no candidate is more specific than all others.\n"
            f"Candidates are:\n{listing}"
        )
        raise GenWireAmbiguousResolutionError(msg, tied_candidates=tied)

    winner, bindings = maximal[0]
    logger.debug(
        "Resolved %s%s to candidate #%d %s (%d matching candidate(s))",
        name,
        format_arguments(arguments),
        winner.declared_order,
        winner.pattern,
        len(matches),
    )
    return BoundImplementation(
        candidate=winner,
        bindings=MappingProxyType(bindings),
        arguments=arguments,
    )


__all__ = [
    "BoundImplementation",
    "resolve_candidates",
    "validate_concrete_arguments",
]
