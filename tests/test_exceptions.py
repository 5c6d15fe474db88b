"""Tests for custom exception hierarchy."""

import inspect
import re

import pytest

import genwire
from genwire import Catalog, Leaf, Pattern, PointerTo, Var
from genwire.exceptions import (
    GenWireAmbiguousResolutionError,
    GenWireCapabilityUnavailableError,
    GenWireCatalogSealedError,
    GenWireDuplicatePatternError,
    GenWireError,
    GenWireInvalidPatternError,
    GenWireInvalidTypeArgumentError,
    GenWireNoMatchError,
    GenWireRegistrationError,
    GenWireResolutionError,
    GenWireUndeducedParameterError,
    GenWireUnknownGenericError,
)


@pytest.mark.parametrize(
    "error_type",
    [
        GenWireDuplicatePatternError,
        GenWireCatalogSealedError,
        GenWireInvalidPatternError,
    ],
)
def test_registration_errors_share_base(error_type: type[GenWireError]) -> None:
    assert issubclass(error_type, GenWireRegistrationError)
    assert not issubclass(error_type, GenWireResolutionError)


@pytest.mark.parametrize(
    "error_type",
    [
        GenWireUnknownGenericError,
        GenWireNoMatchError,
        GenWireAmbiguousResolutionError,
        GenWireUndeducedParameterError,
        GenWireInvalidTypeArgumentError,
    ],
)
def test_resolution_errors_share_base(error_type: type[GenWireError]) -> None:
    assert issubclass(error_type, GenWireResolutionError)
    assert not issubclass(error_type, GenWireRegistrationError)


def test_capability_error_is_a_genwire_error() -> None:
    assert issubclass(GenWireCapabilityUnavailableError, GenWireError)


class TestGenWireAmbiguousResolutionError:
    def test_carries_tied_candidates(self) -> None:
        error = GenWireAmbiguousResolutionError("tied", tied_candidates=())

        assert error.tied_candidates == ()
        assert str(error) == "tied"

    def test_raised_with_candidate_listing(self, catalog: Catalog) -> None:
        catalog.register("Pair", Pattern.of(Var("a"), Var("a")), "same")
        catalog.register("Pair", Pattern.of(Leaf("int"), Var("b")), "int-first")

        with pytest.raises(GenWireResolutionError) as exc_info:
            catalog.resolve("Pair", [Leaf("int"), Leaf("int")])

        assert isinstance(exc_info.value, GenWireAmbiguousResolutionError)
        assert "Candidates are:" in str(exc_info.value)
        assert "'int-first'" in str(exc_info.value)


class TestGenWireNoMatchError:
    def test_lists_registered_patterns(self, catalog: Catalog) -> None:
        catalog.register("Box", Pattern.of(PointerTo(Var("a"))), "pointer")

        with pytest.raises(GenWireNoMatchError) as exc_info:
            catalog.resolve("Box", [Leaf("int")])

        assert "Registered patterns: <?a*>" in str(exc_info.value)


_RAISING_OPERATION = re.compile(r"``(Catalog|BoundImplementation)\.(\w+)``")


@pytest.mark.parametrize(
    "error_type",
    [
        GenWireDuplicatePatternError,
        GenWireCatalogSealedError,
        GenWireInvalidPatternError,
        GenWireUnknownGenericError,
        GenWireNoMatchError,
        GenWireAmbiguousResolutionError,
        GenWireUndeducedParameterError,
        GenWireInvalidTypeArgumentError,
        GenWireCapabilityUnavailableError,
    ],
    ids=lambda error_type: error_type.__name__,
)
def test_concrete_errors_name_existing_operations_that_raise_them(
    error_type: type[GenWireError],
) -> None:
    docstring = inspect.getdoc(error_type) or ""
    assert "Raised by " in docstring

    raised_by = docstring.split("Raised by ", maxsplit=1)[1].split("\n\n", maxsplit=1)[0]
    operations = _RAISING_OPERATION.findall(raised_by)

    assert operations
    for owner_name, operation_name in operations:
        owner = getattr(genwire, owner_name)
        assert callable(getattr(owner, operation_name, None)), f"{owner_name}.{operation_name}"
