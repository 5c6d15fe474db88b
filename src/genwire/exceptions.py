from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from genwire._internal.catalog import Candidate


class GenWireError(Exception):
    """Represent a base class for all genwire-specific failures.

    Catch this type when you want to handle any genwire error path without
    matching each concrete exception class individually.
    """


class GenWireRegistrationError(GenWireError):
    """Signal an invalid change to a catalog entry.

    Raised by ``Catalog.register``, ``Catalog.declare_parameters`` and
    ``Catalog.add_guide``. The catalog entry is left exactly as it was before
    the failing call.
    """


class GenWireDuplicatePatternError(GenWireRegistrationError):
    """Signal that a structurally identical pattern is already registered.

    Raised by ``Catalog.register``. Patterns are compared after renaming their
    variables by first occurrence, so ``[?a]`` and ``[?b]`` are duplicates of
    each other.

    Typical fix is registering a single candidate per pattern, or making one of
    the patterns more specific.
    """


class GenWireCatalogSealedError(GenWireRegistrationError):
    """Signal registration against a generic that has already been resolved.

    Raised by ``Catalog.register``, ``Catalog.declare_parameters`` and
    ``Catalog.add_guide``. A generic is sealed by ``Catalog.seal`` or by its
    first resolution. After that its candidate set is read-only for the
    lifetime of the catalog.

    Typical fix is finishing all registrations during startup, before the first
    ``resolve``/``deduce_and_resolve`` call.
    """


class GenWireInvalidPatternError(GenWireRegistrationError):
    """Signal a pattern or parameter declaration that cannot belong to a generic.

    Raised by ``Catalog.register`` and ``Catalog.declare_parameters`` when a
    pattern's arity differs from earlier registrations or from the declared
    deduction parameters of the same generic.
    """


class GenWireResolutionError(GenWireError):
    """Represent a failure to select exactly one candidate for a request."""


class GenWireUnknownGenericError(GenWireResolutionError):
    """Signal a lookup for a generic name that was never registered.

    Raised by ``Catalog.resolve``, ``Catalog.deduce_and_resolve``,
    ``Catalog.candidates_for`` and ``Catalog.seal``.
    """


class GenWireNoMatchError(GenWireResolutionError):
    """Signal that no candidate pattern unifies with the requested arguments.

    Raised by ``Catalog.resolve`` and ``Catalog.deduce_and_resolve``. Common
    triggers are an arity mismatch or a request for a type shape no candidate
    accepts (for example a pointer when only leaves are registered).
    """


class GenWireAmbiguousResolutionError(GenWireResolutionError):
    """Signal that several matching candidates are equally most specific.

    Raised by ``Catalog.resolve`` and ``Catalog.deduce_and_resolve``.
    ``tied_candidates`` lists the maximal candidates in declaration order. The
    engine never picks one of them on its own.

    Typical fix is registering a candidate that is more specific than every tied
    candidate for the conflicting arguments.
    """

    def __init__(self, message: str, *, tied_candidates: tuple[Candidate, ...]) -> None:
        super().__init__(message)
        self.tied_candidates = tied_candidates


class GenWireUndeducedParameterError(GenWireResolutionError):
    """Signal that deduction could not determine a required type argument.

    Raised by ``Catalog.deduce_and_resolve`` when no value was supplied for a
    parameter without a default, when a deduction guide leaves a variable
    unbound, or when a raw value has no natural type.
    """


class GenWireInvalidTypeArgumentError(GenWireResolutionError):
    """Signal a concrete argument list that still contains free variables.

    Raised by ``Catalog.resolve``. Variables belong in patterns and guides
    only. Resolve with concrete descriptors such as ``Leaf("int")`` or
    ``PointerTo(Leaf("int"))``.
    """


class GenWireCapabilityUnavailableError(GenWireError):
    """Signal use of an optional operation the bound types do not support.

    Raised by ``BoundImplementation.require_capability``. Check
    ``BoundImplementation.has_capability`` first to branch without an exception.
    """
