from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from genwire._internal.descriptors import (
    ArrayOf,
    FunctionOf,
    Leaf,
    PointerTo,
    Qualified,
    ReferenceTo,
    TypeDescriptor,
    contains_var,
    format_arguments,
    is_descriptor,
    substitute,
)
from genwire._internal.patterns import Pattern, match
from genwire._internal.policies import ParameterPassing
from genwire._internal.type_checks import (
    is_callable_reference,
    is_runtime_class,
    leaf_name_for_class,
)
from genwire.exceptions import GenWireUndeducedParameterError

logger = logging.getLogger(__name__)

_UNKNOWN_LEAF = Leaf("object")


@dataclass(frozen=True, slots=True)
class Parameter:
    """Declare one deducible type parameter of a generic.

    ``passing`` selects whether the raw value's natural type decays
    (``BY_VALUE``) or is kept as-is (``BY_REFERENCE``). ``default`` is used
    when the caller supplies no value for this position.
    """

    name: str
    passing: ParameterPassing = ParameterPassing.BY_VALUE
    default: TypeDescriptor | None = None


@dataclass(frozen=True, slots=True)
class DeductionGuide:
    """Force the type arguments deduced for raw values of a given shape.

    ``value_shape`` is matched against the natural types of the raw values
    before any decay. On a match, ``forced`` is used verbatim after
    substituting the variables bound by ``value_shape``.

    Examples:
        .. code-block:: python

            # A character-sequence literal deduces "string", not "const char*".
            DeductionGuide(
                value_shape=Pattern.of(ArrayOf(Qualified(Leaf("char")), Var("n"))),
                forced=(Leaf("string"),),
            )

    """

    value_shape: Pattern
    forced: tuple[TypeDescriptor, ...]

    def apply(self, natural_types: Sequence[TypeDescriptor]) -> tuple[TypeDescriptor, ...] | None:
        """Return the forced argument list, or ``None`` when the shape does not match.

        Raises:
            GenWireUndeducedParameterError: If ``forced`` references a variable
                the value shape does not bind.

        """
        bindings = match(self.value_shape, natural_types)
        if bindings is None:
            return None
        forced = tuple(substitute(argument, bindings=bindings) for argument in self.forced)
        for argument in forced:
            if isinstance(argument, int) or contains_var(argument):
                msg = (
                    f"Deduction guide {self.value_shape} -> {format_arguments(self.forced)} "
                    f"leaves {argument} undetermined for values "
                    f"{format_arguments(tuple(natural_types))}."
                )
                raise GenWireUndeducedParameterError(msg)
        return forced  # type: ignore[return-value]


def decay(natural_type: TypeDescriptor) -> TypeDescriptor:
    """Normalize a natural type the way by-value deduction sees it.

    Drops top-level qualifiers, collapses references, and converts fixed-size
    sequences and callables into pointers.

    Args:
        natural_type: The raw value's natural type.

    Returns:
        The decayed descriptor.

    """
    decayed = natural_type
    while isinstance(decayed, (ReferenceTo, Qualified)):
        decayed = decayed.inner
    if isinstance(decayed, ArrayOf):
        return PointerTo(decayed.element)
    if isinstance(decayed, FunctionOf):
        return PointerTo(decayed)
    return decayed


def pass_by_reference(natural_type: TypeDescriptor) -> TypeDescriptor:
    """Return the natural type unchanged apart from its outer reference."""
    if isinstance(natural_type, ReferenceTo):
        return natural_type.inner
    return natural_type


def natural_type_of(value: Any) -> TypeDescriptor:
    """Return the natural type of a plain Python value.

    Type descriptors are returned unchanged, so callers can mix explicit
    natural types with ordinary values.

    Args:
        value: Raw construction value.

    Returns:
        The natural type descriptor of ``value``.

    Raises:
        GenWireUndeducedParameterError: If ``value`` is an empty or
            heterogeneous tuple, which has no element type.

    """
    if is_descriptor(value):
        return value
    if isinstance(value, str):
        return ArrayOf(Qualified(Leaf("char")), len(value.encode("utf-8")) + 1)
    if isinstance(value, bytes):
        return ArrayOf(Qualified(Leaf("byte")), len(value))
    if isinstance(value, bytearray):
        return ArrayOf(Leaf("byte"), len(value))
    if isinstance(value, tuple):
        return _tuple_natural_type(value)
    if is_callable_reference(value):
        return _callable_natural_type(value)
    return Leaf(leaf_name_for_class(type(value)))


def deduce_arguments(
    raw_values: Iterable[Any],
    *,
    parameters: Sequence[Parameter] | None,
    guides: Sequence[DeductionGuide],
    default_passing: ParameterPassing,
) -> tuple[TypeDescriptor, ...]:
    """Turn raw construction values into a concrete argument list.

    Guides are tried first in order; the first match wins and its forced list
    is returned without decay. Otherwise every value is converted according to
    its parameter's passing mode, and missing trailing values fall back to
    parameter defaults.

    Args:
        raw_values: Construction values or natural type descriptors.
        parameters: Declared parameters, or ``None`` to derive one parameter
            per supplied value using ``default_passing``.
        guides: Deduction guides in priority order.
        default_passing: Passing mode for undeclared parameters.

    Returns:
        The concrete argument list to resolve.

    Raises:
        GenWireUndeducedParameterError: If a required argument cannot be
            determined.

    """
    natural_types = tuple(natural_type_of(value) for value in raw_values)

    for guide in guides:
        forced = guide.apply(natural_types)
        if forced is not None:
            logger.debug(
                "Deduction guide %s matched values %s -> %s",
                guide.value_shape,
                format_arguments(natural_types),
                format_arguments(forced),
            )
            return forced

    if parameters is None:
        parameters = tuple(
            Parameter(name=f"_{index}", passing=default_passing)
            for index in range(len(natural_types))
        )

    arguments: list[TypeDescriptor] = []
    for index, parameter in enumerate(parameters):
        if index < len(natural_types):
            arguments.append(_convert(natural_types[index], passing=parameter.passing))
        elif parameter.default is not None:
            arguments.append(parameter.default)
        else:
            msg = (
                f"Cannot deduce type parameter '{parameter.name}' (position {index}): "
                f"no value supplied and no default declared."
            )
            raise GenWireUndeducedParameterError(msg)

    arguments.extend(
        _convert(natural_type, passing=default_passing)
        for natural_type in natural_types[len(parameters) :]
    )
    return tuple(arguments)


def _convert(natural_type: TypeDescriptor, *, passing: ParameterPassing) -> TypeDescriptor:
    if passing is ParameterPassing.BY_REFERENCE:
        return pass_by_reference(natural_type)
    return decay(natural_type)


def _tuple_natural_type(value: tuple[Any, ...]) -> TypeDescriptor:
    if not value:
        msg = "Cannot deduce the element type of an empty tuple."
        raise GenWireUndeducedParameterError(msg)
    element_types = {natural_type_of(item) for item in value}
    if len(element_types) != 1:
        formatted = ", ".join(sorted(str(element_type) for element_type in element_types))
        msg = f"Cannot deduce a single element type for a tuple mixing {formatted}."
        raise GenWireUndeducedParameterError(msg)
    (element_type,) = element_types
    return ArrayOf(element_type, len(value))


def _callable_natural_type(value: Any) -> TypeDescriptor:
    try:
        signature = inspect.signature(value, eval_str=True)
    except (NameError, TypeError, ValueError):
        try:
            signature = inspect.signature(value)
        except (TypeError, ValueError) as error:
            msg = f"Cannot inspect the signature of callable {value!r}."
            raise GenWireUndeducedParameterError(msg) from error

    parameters = tuple(
        _annotation_descriptor(parameter.annotation)
        for parameter in signature.parameters.values()
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
    )
    return FunctionOf(parameters, _annotation_descriptor(signature.return_annotation))


def _annotation_descriptor(annotation: Any) -> TypeDescriptor:
    if annotation is inspect.Signature.empty:
        return _UNKNOWN_LEAF
    if annotation is None:
        return Leaf("void")
    if is_runtime_class(annotation):
        return Leaf(leaf_name_for_class(annotation))
    return Leaf(str(annotation))


__all__ = [
    "DeductionGuide",
    "Parameter",
    "decay",
    "deduce_arguments",
    "natural_type_of",
    "pass_by_reference",
]
