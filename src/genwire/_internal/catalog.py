from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, TypeAlias, TypeVar, overload

from genwire._internal.deduction import DeductionGuide, Parameter, deduce_arguments
from genwire._internal.descriptors import (
    Bindings,
    TypeDescriptor,
    contains_var,
    format_arguments,
)
from genwire._internal.patterns import Pattern
from genwire._internal.policies import ParameterPassing
from genwire._internal.resolver import (
    BoundImplementation,
    resolve_candidates,
    validate_concrete_arguments,
)
from genwire._internal.settings import GenWireSettings
from genwire.exceptions import (
    GenWireCatalogSealedError,
    GenWireDuplicatePatternError,
    GenWireInvalidPatternError,
    GenWireUnknownGenericError,
)
from genwire.lock_mode import LockMode

CapabilityPredicate: TypeAlias = Callable[[Bindings], bool]
ImplementationT = TypeVar("ImplementationT")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class Candidate:
    """Pair a pattern with the implementation that serves matching requests.

    ``declared_order`` is the 1-based registration position within the generic.
    It only orders ambiguity reports and never influences which candidate wins.
    """

    name: str
    pattern: Pattern
    implementation: Any
    declared_order: int
    capabilities: Mapping[str, CapabilityPredicate] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def __repr__(self) -> str:
        return (
            f"Candidate({self.name!r}, #{self.declared_order}, {self.pattern}, "
            f"{self.implementation!r})"
        )


@dataclass(slots=True)
class _CatalogEntry:
    name: str
    candidates: tuple[Candidate, ...] = ()
    canonical_patterns: dict[Pattern, Candidate] = field(default_factory=dict)
    arity: int | None = None
    parameters: tuple[Parameter, ...] | None = None
    guides: tuple[DeductionGuide, ...] = ()
    sealed: bool = False


class Catalog:
    """Register candidates for generic names and resolve instantiation requests.

    Each generic name owns an ordered set of candidates. Registration is open
    until the name is sealed, either explicitly through ``seal`` or implicitly
    by its first ``resolve``/``deduce_and_resolve`` call. Sealed entries are
    read-only and are read without locking.

    Examples:
        .. code-block:: python

            catalog = Catalog()
            catalog.register("Box", Pattern.of(Var("a")), Box)
            catalog.register("Box", Pattern.of(PointerTo(Var("a"))), PointerBox)
            catalog.register("Box", Pattern.of(Leaf("text")), TextBox)

            assert catalog.resolve("Box", [Leaf("text")]).implementation is TextBox

    """

    def __init__(
        self,
        *,
        lock_mode: LockMode | None = None,
        default_passing: ParameterPassing | None = None,
        cache_resolutions: bool | None = None,
        resolution_cache_size: int | None = None,
        settings: GenWireSettings | None = None,
    ) -> None:
        """Initialize an empty catalog.

        Args:
            lock_mode: Serialization for registration and sealing. ``None``
                uses the settings value.
            default_passing: Passing mode for generics without declared
                parameters. ``None`` uses the settings value.
            cache_resolutions: Memoize successful resolutions of sealed
                generics. ``None`` uses the settings value.
            resolution_cache_size: Maximum number of memoized resolutions. When
                full, the oldest entry is evicted. ``None`` uses the settings
                value.
            settings: Defaults source. ``None`` reads ``GENWIRE_*`` environment
                variables.

        """
        if settings is None:
            settings = GenWireSettings()
        self._lock_mode = settings.lock_mode if lock_mode is None else lock_mode
        self._default_passing = (
            settings.default_passing if default_passing is None else default_passing
        )
        self._cache_resolutions = (
            settings.cache_resolutions if cache_resolutions is None else cache_resolutions
        )
        self._resolution_cache_size = (
            settings.resolution_cache_size
            if resolution_cache_size is None
            else resolution_cache_size
        )
        if self._resolution_cache_size < 1:
            msg = f"resolution_cache_size must be at least 1, got {self._resolution_cache_size}."
            raise ValueError(msg)
        self._registration_lock: AbstractContextManager[Any] = (
            threading.Lock() if self._lock_mode is LockMode.THREAD else nullcontext()
        )
        self._cache_lock: AbstractContextManager[Any] = (
            threading.Lock() if self._lock_mode is LockMode.THREAD else nullcontext()
        )
        self._entries: dict[str, _CatalogEntry] = {}
        self._cache: dict[tuple[str, tuple[TypeDescriptor, ...]], BoundImplementation] = {}

    @property
    def lock_mode(self) -> LockMode:
        """Return the registration lock mode in effect."""
        return self._lock_mode

    @overload
    def register(
        self,
        name: str,
        pattern: Pattern,
        implementation: ImplementationT,
        *,
        capabilities: Mapping[str, CapabilityPredicate] | None = None,
    ) -> Candidate: ...

    @overload
    def register(
        self,
        name: str,
        pattern: Pattern,
        implementation: Literal["from_decorator"] = "from_decorator",
        *,
        capabilities: Mapping[str, CapabilityPredicate] | None = None,
    ) -> Callable[[ImplementationT], ImplementationT]: ...

    def register(
        self,
        name: str,
        pattern: Pattern,
        implementation: Any = "from_decorator",
        *,
        capabilities: Mapping[str, CapabilityPredicate] | None = None,
    ) -> Candidate | Callable[[ImplementationT], ImplementationT]:
        """Register an implementation for argument lists matching ``pattern``.

        Supports direct calls and decorator form.

        Args:
            name: Generic name the candidate competes for.
            pattern: Shape of the argument lists this candidate accepts.
            implementation: Opaque implementation handle, or
                ``"from_decorator"`` to return a decorator.
            capabilities: Optional operations mapped to predicates over the
                unification bindings.

        Returns:
            The new candidate in direct mode, or a decorator that registers
            the decorated object and returns it unchanged.

        Raises:
            GenWireCatalogSealedError: If ``name`` is already sealed.
            GenWireDuplicatePatternError: If an equal pattern is registered.
            GenWireInvalidPatternError: If the arity differs from the generic's.

        Examples:
            .. code-block:: python

                @catalog.register("Stack", Pattern.of(PointerTo(Var("t"))))
                class PointerStack: ...

        """
        if isinstance(implementation, str) and implementation == "from_decorator":

            def decorator(decorated: ImplementationT) -> ImplementationT:
                self._register(name, pattern, decorated, capabilities=capabilities)
                return decorated

            return decorator

        return self._register(name, pattern, implementation, capabilities=capabilities)

    def declare_parameters(self, name: str, *parameters: Parameter) -> None:
        """Declare the deducible type parameters of ``name``.

        Declarations fix the generic's arity, the passing mode of every
        position, and defaults for trailing positions. A later declaration
        replaces an earlier one while the generic is unsealed.

        Args:
            name: Generic name.
            *parameters: Parameters in positional order.

        Raises:
            GenWireCatalogSealedError: If ``name`` is already sealed.
            GenWireInvalidPatternError: If the parameter count differs from the
                registered patterns, or a default is not concrete.

        """
        for parameter in parameters:
            if parameter.default is not None and contains_var(parameter.default):
                msg = (
                    f"Default of parameter '{parameter.name}' of '{name}' must be concrete, "
                    f"got {parameter.default}."
                )
                raise GenWireInvalidPatternError(msg)

        with self._registration_lock:
            entry = self._entries.get(name) or _CatalogEntry(name=name)
            self._ensure_unsealed(entry)
            if entry.candidates and entry.arity != len(parameters):
                msg = (
                    f"Generic '{name}' has arity {entry.arity}; cannot declare "
                    f"{len(parameters)} parameter(s)."
                )
                raise GenWireInvalidPatternError(msg)
            entry.parameters = tuple(parameters)
            entry.arity = len(parameters)
            self._entries.setdefault(name, entry)

    def add_guide(self, name: str, guide: DeductionGuide) -> None:
        """Register a deduction guide consulted by ``deduce_and_resolve``.

        Catalog guides are tried in registration order, after any guides the
        caller passes explicitly.

        Args:
            name: Generic name.
            guide: Guide to append.

        Raises:
            GenWireCatalogSealedError: If ``name`` is already sealed.

        """
        with self._registration_lock:
            entry = self._entries.get(name) or _CatalogEntry(name=name)
            self._ensure_unsealed(entry)
            entry.guides = (*entry.guides, guide)
            self._entries.setdefault(name, entry)

    def seal(self, name: str) -> None:
        """Mark ``name`` read-only. Sealing an already sealed generic is a no-op.

        Raises:
            GenWireUnknownGenericError: If ``name`` was never registered.

        """
        entry = self._entry(name)
        if entry.sealed:
            return
        with self._registration_lock:
            if entry.sealed:
                return
            entry.sealed = True
        logger.info(
            "Sealed generic '%s' with %d candidate(s) and %d deduction guide(s)",
            name,
            len(entry.candidates),
            len(entry.guides),
        )

    def is_sealed(self, name: str) -> bool:
        """Return whether ``name`` accepts no further registrations.

        Raises:
            GenWireUnknownGenericError: If ``name`` was never registered.

        """
        return self._entry(name).sealed

    def names(self) -> tuple[str, ...]:
        """Return every known generic name in first-registration order."""
        return tuple(self._entries)

    def candidates_for(self, name: str) -> tuple[Candidate, ...]:
        """Return the candidates of ``name`` in declaration order.

        Raises:
            GenWireUnknownGenericError: If ``name`` was never registered.

        """
        return self._entry(name).candidates

    def resolve(self, name: str, arguments: Iterable[TypeDescriptor]) -> BoundImplementation:
        """Resolve ``name`` for explicit concrete type arguments.

        The first call for a name seals it.

        Args:
            name: Generic name.
            arguments: Concrete type descriptors, one per slot.

        Returns:
            The most specific matching candidate with its bindings.

        Raises:
            GenWireUnknownGenericError: If ``name`` was never registered.
            GenWireInvalidTypeArgumentError: If an argument contains a ``Var``.
            GenWireNoMatchError: If no candidate matches.
            GenWireAmbiguousResolutionError: If no single candidate is most
                specific.

        """
        arguments = tuple(arguments)
        entry = self._entry(name)
        self.seal(name)
        validate_concrete_arguments(name, arguments)

        cache_key = (name, arguments)
        if self._cache_resolutions:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached

        bound = resolve_candidates(name=name, candidates=entry.candidates, arguments=arguments)
        if self._cache_resolutions:
            self._remember(cache_key, bound)
        return bound

    def deduce_and_resolve(
        self,
        name: str,
        raw_values: Iterable[Any],
        guides: Sequence[DeductionGuide] = (),
    ) -> BoundImplementation:
        """Deduce type arguments from construction values, then resolve.

        ``guides`` are tried before the guides registered on the catalog. When
        no guide matches, each value's natural type is decayed or kept as-is
        according to the declared parameter passing mode.

        Args:
            name: Generic name.
            raw_values: Construction values, or natural type descriptors.
            guides: Extra deduction guides for this call, in priority order.

        Returns:
            The most specific candidate for the deduced arguments.

        Raises:
            GenWireUnknownGenericError: If ``name`` was never registered.
            GenWireUndeducedParameterError: If a required argument cannot be
                deduced.
            GenWireNoMatchError: If no candidate matches.
            GenWireAmbiguousResolutionError: If no single candidate is most
                specific.

        """
        entry = self._entry(name)
        self.seal(name)
        arguments = deduce_arguments(
            raw_values,
            parameters=entry.parameters,
            guides=(*guides, *entry.guides),
            default_passing=self._default_passing,
        )
        logger.debug("Deduced %s%s", name, format_arguments(arguments))
        return self.resolve(name, arguments)

    def _remember(
        self,
        cache_key: tuple[str, tuple[TypeDescriptor, ...]],
        bound: BoundImplementation,
    ) -> None:
        with self._cache_lock:
            if cache_key in self._cache:
                return
            while len(self._cache) >= self._resolution_cache_size:
                del self._cache[next(iter(self._cache))]
            self._cache[cache_key] = bound

    def _register(
        self,
        name: str,
        pattern: Pattern,
        implementation: Any,
        *,
        capabilities: Mapping[str, CapabilityPredicate] | None,
    ) -> Candidate:
        if not isinstance(pattern, Pattern):
            msg = f"Expected a Pattern for '{name}', got {pattern!r}."
            raise GenWireInvalidPatternError(msg)

        canonical = pattern.canonical()
        with self._registration_lock:
            entry = self._entries.get(name) or _CatalogEntry(name=name)
            self._ensure_unsealed(entry)
            if entry.arity is not None and pattern.arity != entry.arity:
                msg = (
                    f"Pattern {pattern} has arity {pattern.arity}, but generic '{name}' "
                    f"has arity {entry.arity}."
                )
                raise GenWireInvalidPatternError(msg)
            existing = entry.canonical_patterns.get(canonical)
            if existing is not None:
                msg = (
                    f"Pattern {pattern} duplicates candidate #{existing.declared_order} "
                    f"{existing.pattern} of generic '{name}'."
                )
                raise GenWireDuplicatePatternError(msg)

            candidate = Candidate(
                name=name,
                pattern=pattern,
                implementation=implementation,
                declared_order=len(entry.candidates) + 1,
                capabilities=MappingProxyType(dict(capabilities or {})),
            )
            entry.canonical_patterns[canonical] = candidate
            entry.candidates = (*entry.candidates, candidate)
            entry.arity = pattern.arity
            self._entries.setdefault(name, entry)

        logger.debug(
            "Registered %s candidate #%d %s%s -> %r",
            pattern.kind.value,
            candidate.declared_order,
            name,
            pattern,
            implementation,
        )
        return candidate

    def _entry(self, name: str) -> _CatalogEntry:
        entry = self._entries.get(name)
        if entry is None:
            msg = f"Generic '{name}' is not registered."
            raise GenWireUnknownGenericError(msg)
        return entry

    @staticmethod
    def _ensure_unsealed(entry: _CatalogEntry) -> None:
        if entry.sealed:
            msg = (
                f"Generic '{entry.name}' is sealed: it has already been resolved, so its "
                f"candidates can no longer change."
            )
            raise GenWireCatalogSealedError(msg)


__all__ = ["CapabilityPredicate", "Candidate", "Catalog"]
