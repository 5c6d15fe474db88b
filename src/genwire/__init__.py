from genwire._internal.catalog import Candidate, Catalog
from genwire._internal.deduction import DeductionGuide, Parameter, natural_type_of
from genwire._internal.descriptors import (
    ArrayOf,
    FunctionOf,
    Leaf,
    PointerTo,
    Qualified,
    ReferenceTo,
    Var,
)
from genwire._internal.patterns import Pattern, PatternKind
from genwire._internal.policies import ParameterPassing
from genwire._internal.resolver import BoundImplementation
from genwire._internal.settings import GenWireSettings
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
from genwire.lock_mode import LockMode

__all__ = [
    "ArrayOf",
    "BoundImplementation",
    "Candidate",
    "Catalog",
    "DeductionGuide",
    "FunctionOf",
    "GenWireAmbiguousResolutionError",
    "GenWireCapabilityUnavailableError",
    "GenWireCatalogSealedError",
    "GenWireDuplicatePatternError",
    "GenWireError",
    "GenWireInvalidPatternError",
    "GenWireInvalidTypeArgumentError",
    "GenWireNoMatchError",
    "GenWireRegistrationError",
    "GenWireResolutionError",
    "GenWireSettings",
    "GenWireUndeducedParameterError",
    "GenWireUnknownGenericError",
    "Leaf",
    "LockMode",
    "Parameter",
    "ParameterPassing",
    "Pattern",
    "PatternKind",
    "PointerTo",
    "Qualified",
    "ReferenceTo",
    "Var",
    "natural_type_of",
]
