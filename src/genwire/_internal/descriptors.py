from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TypeAlias, Union


@dataclass(frozen=True, slots=True)
class Leaf:
    """Represent an opaque concrete type identified by name.

    Two leaves are the same type exactly when their names are equal.

    Examples:
        .. code-block:: python

            INT = Leaf("int")
            assert INT == Leaf("int")

    """

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class PointerTo:
    """Represent a pointer-shaped type wrapping ``inner``."""

    inner: TypeDescriptor

    def __str__(self) -> str:
        return f"{self.inner}*"


@dataclass(frozen=True, slots=True)
class Var:
    """Represent a free type variable.

    Variables are only valid inside patterns and deduction guides. A concrete
    argument list handed to the resolver never contains one.
    """

    id: str

    def __str__(self) -> str:
        return f"?{self.id}"


@dataclass(frozen=True, slots=True)
class ArrayOf:
    """Represent a fixed-size sequence of ``length`` elements.

    ``length`` is a concrete ``int`` for natural types. Patterns may use a
    ``Var`` instead so that one pattern accepts every length.
    """

    element: TypeDescriptor
    length: int | Var

    def __str__(self) -> str:
        return f"{self.element}[{self.length}]"


@dataclass(frozen=True, slots=True)
class FunctionOf:
    """Represent a callable type with positional ``parameters`` and a ``result``."""

    parameters: tuple[TypeDescriptor, ...]
    result: TypeDescriptor

    def __str__(self) -> str:
        parameters = ", ".join(str(parameter) for parameter in self.parameters)
        return f"{self.result}({parameters})"


@dataclass(frozen=True, slots=True)
class Qualified:
    """Represent top-level mutability qualifiers applied to ``inner``."""

    inner: TypeDescriptor
    const: bool = True
    volatile: bool = False

    def __str__(self) -> str:
        qualifiers = [
            name
            for name, enabled in (("const", self.const), ("volatile", self.volatile))
            if enabled
        ]
        return " ".join((*qualifiers, str(self.inner)))


@dataclass(frozen=True, slots=True)
class ReferenceTo:
    """Represent a reference to ``inner``; decay collapses it to ``inner``."""

    inner: TypeDescriptor

    def __str__(self) -> str:
        return f"{self.inner}&"


TypeDescriptor: TypeAlias = Union[
    Leaf,
    PointerTo,
    Var,
    ArrayOf,
    FunctionOf,
    Qualified,
    ReferenceTo,
]
Bindings: TypeAlias = Mapping[Var, Union[TypeDescriptor, int]]

DESCRIPTOR_TYPES = (Leaf, PointerTo, Var, ArrayOf, FunctionOf, Qualified, ReferenceTo)


def is_descriptor(value: object) -> bool:
    """Return whether ``value`` is one of the type descriptor variants.

    Args:
        value: Object to inspect.

    """
    return isinstance(value, DESCRIPTOR_TYPES)


def iter_vars(value: TypeDescriptor | int) -> Iterator[Var]:
    """Yield every ``Var`` occurrence in ``value`` in left-to-right order.

    Repeated variables are yielded once per occurrence.

    Args:
        value: Descriptor (or array length) to walk.

    """
    if isinstance(value, Var):
        yield value
    elif isinstance(value, (PointerTo, Qualified, ReferenceTo)):
        yield from iter_vars(value.inner)
    elif isinstance(value, ArrayOf):
        yield from iter_vars(value.element)
        yield from iter_vars(value.length)
    elif isinstance(value, FunctionOf):
        for parameter in value.parameters:
            yield from iter_vars(parameter)
        yield from iter_vars(value.result)


def contains_var(value: TypeDescriptor | int) -> bool:
    """Return whether a descriptor still contains a free ``Var``.

    Args:
        value: Descriptor (or array length) to inspect.

    Returns:
        ``True`` when any nested node is a ``Var``, else ``False``.

    """
    return next(iter_vars(value), None) is not None


def substitute(value: TypeDescriptor | int, *, bindings: Bindings) -> TypeDescriptor | int:
    """Replace bound variables in ``value`` with their bindings.

    Unbound variables are left in place so callers can detect them with
    :func:`contains_var`.

    Args:
        value: Descriptor template that may contain variables.
        bindings: Mapping from variables to concrete descriptors or lengths.

    Returns:
        The substituted descriptor.

    """
    if isinstance(value, Var):
        return bindings.get(value, value)
    if isinstance(value, PointerTo):
        return PointerTo(_substitute_descriptor(value.inner, bindings=bindings))
    if isinstance(value, ReferenceTo):
        return ReferenceTo(_substitute_descriptor(value.inner, bindings=bindings))
    if isinstance(value, Qualified):
        return Qualified(
            _substitute_descriptor(value.inner, bindings=bindings),
            const=value.const,
            volatile=value.volatile,
        )
    if isinstance(value, ArrayOf):
        length = substitute(value.length, bindings=bindings)
        if not isinstance(length, (int, Var)):
            msg = f"Array length {value.length} is bound to a type, not a length: {length}."
            raise TypeError(msg)
        return ArrayOf(_substitute_descriptor(value.element, bindings=bindings), length)
    if isinstance(value, FunctionOf):
        return FunctionOf(
            tuple(
                _substitute_descriptor(parameter, bindings=bindings)
                for parameter in value.parameters
            ),
            _substitute_descriptor(value.result, bindings=bindings),
        )
    return value


def _substitute_descriptor(value: TypeDescriptor, *, bindings: Bindings) -> TypeDescriptor:
    substituted = substitute(value, bindings=bindings)
    if isinstance(substituted, int):
        msg = f"Type variable {value} is bound to a length, not a type: {substituted}."
        raise TypeError(msg)
    return substituted


def format_arguments(arguments: tuple[TypeDescriptor, ...]) -> str:
    """Render an argument list as ``<a, b>`` for error messages and logs."""
    return "<" + ", ".join(str(argument) for argument in arguments) + ">"


__all__ = [
    "DESCRIPTOR_TYPES",
    "ArrayOf",
    "Bindings",
    "FunctionOf",
    "Leaf",
    "PointerTo",
    "Qualified",
    "ReferenceTo",
    "TypeDescriptor",
    "Var",
    "contains_var",
    "format_arguments",
    "is_descriptor",
    "iter_vars",
    "substitute",
]
