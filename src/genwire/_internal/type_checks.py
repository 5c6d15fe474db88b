from __future__ import annotations

import inspect
import types
from typing import Any, TypeGuard

_BUILTIN_LEAF_NAMES: dict[type[Any], str] = {
    bool: "bool",
    int: "int",
    float: "double",
    str: "string",
    bytes: "bytes",
    type(None): "void",
}


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_callable_reference(candidate: object) -> bool:
    """Return true when candidate is a plain function or bound method.

    Classes and callable instances are not callable references: they keep their
    own class identity as natural type.

    Args:
        candidate: Value being checked.

    """
    return (
        inspect.isfunction(candidate)
        or inspect.ismethod(candidate)
        or inspect.isbuiltin(candidate)
    )


def leaf_name_for_class(cls: type[Any]) -> str:
    """Return the leaf name used for values of ``cls``.

    Builtin scalar classes map to their conventional short names; everything
    else uses the class qualname.

    Args:
        cls: Runtime class.

    """
    return _BUILTIN_LEAF_NAMES.get(cls, cls.__qualname__)


__all__ = ["is_callable_reference", "is_runtime_class", "leaf_name_for_class"]
